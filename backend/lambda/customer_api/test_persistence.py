"""test_persistence.py — Mock-based tests for the DynamoDB customer store.

All locally runnable without AWS credentials.

Run: python3 -m pytest test_persistence.py -v
"""

from __future__ import annotations

import os
import sys
import unittest
from unittest.mock import MagicMock

from botocore.exceptions import ClientError, ReadTimeoutError

sys.path.insert(0, os.path.dirname(__file__))

from errors import StoreError
from persistence import CustomerStore, _build_update_expression


def _client_error(code: str, operation: str = "PutItem") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


RAW_ITEM = {
    "customerId": {"S": "c-1"},
    "tenantId": {"S": "t-1"},
    "firstName": {"S": "Ann"},
    "lastName": {"S": ""},
    "createdAt": {"N": "1700000000000"},
    "updatedAt": {"N": "1700000000000"},
}


class StoreTestCase(unittest.TestCase):
    def setUp(self):
        self.ddb = MagicMock()
        self.store = CustomerStore(self.ddb, "customers", "tenantId-index")


class PutTests(StoreTestCase):
    def test_put_is_conditional_on_absent_id(self):
        ok = self.store.put_if_absent({"customerId": "c-1", "tenantId": "t-1", "createdAt": 5})
        self.assertTrue(ok)
        kwargs = self.ddb.put_item.call_args.kwargs
        self.assertEqual(kwargs["TableName"], "customers")
        self.assertEqual(kwargs["ConditionExpression"], "attribute_not_exists(customerId)")
        self.assertEqual(kwargs["Item"]["customerId"], {"S": "c-1"})
        self.assertEqual(kwargs["Item"]["createdAt"], {"N": "5"})

    def test_condition_failure_returns_false(self):
        self.ddb.put_item.side_effect = _client_error("ConditionalCheckFailedException")
        self.assertFalse(self.store.put_if_absent({"customerId": "c-1"}))

    def test_other_client_errors_become_store_errors(self):
        self.ddb.put_item.side_effect = _client_error("ProvisionedThroughputExceededException")
        with self.assertRaises(StoreError) as ctx:
            self.store.put_if_absent({"customerId": "c-1"})
        self.assertEqual(ctx.exception.code, "ProvisionedThroughputExceededException")


class GetTests(StoreTestCase):
    def test_get_deserializes_numbers_to_int(self):
        self.ddb.get_item.return_value = {"Item": RAW_ITEM}
        item = self.store.get("c-1")
        self.assertEqual(item["firstName"], "Ann")
        self.assertEqual(item["createdAt"], 1700000000000)
        self.assertIsInstance(item["createdAt"], int)
        self.assertEqual(self.ddb.get_item.call_args.kwargs["Key"], {"customerId": {"S": "c-1"}})

    def test_missing_item_returns_none(self):
        self.ddb.get_item.return_value = {}
        self.assertIsNone(self.store.get("missing"))

    def test_timeout_becomes_store_error(self):
        self.ddb.get_item.side_effect = ReadTimeoutError(endpoint_url="https://dynamodb")
        with self.assertRaises(StoreError) as ctx:
            self.store.get("c-1")
        self.assertEqual(ctx.exception.code, "ReadTimeoutError")


class QueryAndScanTests(StoreTestCase):
    def test_query_uses_tenant_index_and_limit(self):
        self.ddb.query.return_value = {"Items": [RAW_ITEM]}
        items = self.store.query_by_tenant("t-1", 25)
        self.assertEqual([i["customerId"] for i in items], ["c-1"])
        kwargs = self.ddb.query.call_args.kwargs
        self.assertEqual(kwargs["IndexName"], "tenantId-index")
        self.assertEqual(kwargs["KeyConditionExpression"], "tenantId = :tenantId")
        self.assertEqual(kwargs["ExpressionAttributeValues"], {":tenantId": {"S": "t-1"}})
        self.assertEqual(kwargs["Limit"], 25)
        self.assertNotIn("ExclusiveStartKey", kwargs)

    def test_scan_follows_pagination(self):
        second = dict(RAW_ITEM, customerId={"S": "c-2"})
        self.ddb.scan.side_effect = [
            {"Items": [RAW_ITEM], "LastEvaluatedKey": {"customerId": {"S": "c-1"}}},
            {"Items": [second]},
        ]
        items = list(self.store.scan_by_tenant("t-1"))
        self.assertEqual([i["customerId"] for i in items], ["c-1", "c-2"])
        self.assertEqual(self.ddb.scan.call_count, 2)
        first_kwargs = self.ddb.scan.call_args_list[0].kwargs
        self.assertEqual(first_kwargs["FilterExpression"], "tenantId = :tenantId")
        self.assertNotIn("ExclusiveStartKey", first_kwargs)
        second_kwargs = self.ddb.scan.call_args_list[1].kwargs
        self.assertEqual(second_kwargs["ExclusiveStartKey"], {"customerId": {"S": "c-1"}})

    def test_scan_failure_becomes_store_error(self):
        self.ddb.scan.side_effect = _client_error("InternalServerError", "Scan")
        with self.assertRaises(StoreError):
            list(self.store.scan_by_tenant("t-1"))


class UpdateTests(StoreTestCase):
    def test_update_expression_uses_placeholders(self):
        expr = _build_update_expression({"state": "TX", "updatedAt": 9})
        self.assertEqual(expr["UpdateExpression"], "SET #f0 = :v0, #f1 = :v1")
        self.assertEqual(expr["ExpressionAttributeNames"], {"#f0": "state", "#f1": "updatedAt"})
        self.assertEqual(expr["ExpressionAttributeValues"], {":v0": {"S": "TX"}, ":v1": {"N": "9"}})

    def test_update_returns_all_new_attributes(self):
        self.ddb.update_item.return_value = {"Attributes": RAW_ITEM}
        item = self.store.update_attributes("c-1", {"firstName": "Ann", "updatedAt": 2})
        self.assertEqual(item["customerId"], "c-1")
        kwargs = self.ddb.update_item.call_args.kwargs
        self.assertEqual(kwargs["ReturnValues"], "ALL_NEW")
        self.assertEqual(kwargs["ConditionExpression"], "attribute_exists(customerId)")
        self.assertEqual(kwargs["Key"], {"customerId": {"S": "c-1"}})

    def test_update_of_missing_record_returns_none(self):
        self.ddb.update_item.side_effect = _client_error("ConditionalCheckFailedException", "UpdateItem")
        self.assertIsNone(self.store.update_attributes("gone", {"updatedAt": 2}))

    def test_empty_update_rejected(self):
        with self.assertRaises(ValueError):
            self.store.update_attributes("c-1", {})
        self.ddb.update_item.assert_not_called()


class DeleteTests(StoreTestCase):
    def test_delete_is_unconditional(self):
        self.store.delete("c-1")
        kwargs = self.ddb.delete_item.call_args.kwargs
        self.assertEqual(kwargs, {"TableName": "customers", "Key": {"customerId": {"S": "c-1"}}})

    def test_delete_failure_becomes_store_error(self):
        self.ddb.delete_item.side_effect = _client_error("ResourceNotFoundException", "DeleteItem")
        with self.assertRaises(StoreError):
            self.store.delete("c-1")


if __name__ == "__main__":
    unittest.main()
