"""test_validation.py — Unit tests for create/update schema validation.

Run: python3 -m pytest test_validation.py -v
"""

from __future__ import annotations

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(__file__))

from errors import ValidationError
from normalizer import normalize_customer_input
from validation import validate_create, validate_update


class CreateValidationTests(unittest.TestCase):
    def test_minimal_payload_gets_defaults(self):
        out = validate_create({"firstName": "Ann"})
        self.assertEqual(out["firstName"], "Ann")
        self.assertEqual(out["lastName"], "")
        self.assertEqual(out["email"], "")
        self.assertEqual(out["zipCode"], "")
        self.assertEqual(len(out), 9)

    def test_missing_first_name(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_create({"lastName": "Lee"})
        self.assertEqual(ctx.exception.fields(), ["firstName"])
        self.assertEqual(ctx.exception.details[0]["message"], "First name is required")

    def test_empty_first_name(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_create(normalize_customer_input({"lastName": "Lee"}))
        self.assertIn("firstName", ctx.exception.fields())

    def test_empty_email_is_allowed(self):
        out = validate_create({"firstName": "Ann", "email": ""})
        self.assertEqual(out["email"], "")

    def test_valid_email_is_kept_verbatim(self):
        out = validate_create({"firstName": "Ann", "email": "Ann.Lee@Example.com"})
        self.assertEqual(out["email"], "Ann.Lee@Example.com")

    def test_reserved_and_dotless_domains_are_valid_format(self):
        for email in ("a@b.test", "a@host.local", "a@localhost", "ops@intranet"):
            out = validate_create({"firstName": "Ann", "email": email})
            self.assertEqual(out["email"], email)

    def test_invalid_email(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_create({"firstName": "Ann", "email": "not-an-email"})
        self.assertEqual(ctx.exception.details, [
            {"field": "email", "message": "Valid email is required"},
        ])

    def test_all_violations_reported_together(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_create({"firstName": "", "email": "bad", "phone": 12345})
        self.assertEqual(sorted(ctx.exception.fields()), ["email", "firstName", "phone"])

    def test_non_string_field_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_create({"firstName": "Ann", "city": ["Austin"]})
        self.assertEqual(ctx.exception.details, [
            {"field": "city", "message": "City must be a string"},
        ])

    def test_unknown_keys_are_ignored(self):
        out = validate_create({"firstName": "Ann", "tenantId": "t-other"})
        self.assertNotIn("tenantId", out)

    def test_non_mapping_reports_missing_first_name(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_create(None)
        self.assertEqual(ctx.exception.fields(), ["firstName"])


class UpdateValidationTests(unittest.TestCase):
    def test_empty_update_is_valid(self):
        self.assertEqual(validate_update({}), {})

    def test_only_supplied_fields_returned(self):
        out = validate_update({"city": "Austin", "lastName": ""})
        self.assertEqual(out, {"city": "Austin", "lastName": ""})

    def test_supplied_first_name_must_not_be_empty(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_update({"firstName": ""})
        self.assertEqual(ctx.exception.fields(), ["firstName"])

    def test_supplied_email_must_be_valid(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_update({"email": "nope@"})
        self.assertEqual(ctx.exception.fields(), ["email"])

    def test_email_can_be_cleared(self):
        self.assertEqual(validate_update({"email": ""}), {"email": ""})

    def test_multiple_violations(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_update({"firstName": "", "email": "bad", "notes": 3})
        self.assertEqual(sorted(ctx.exception.fields()), ["email", "firstName", "notes"])

    def test_explicit_null_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_update({"firstName": None})
        self.assertEqual(ctx.exception.fields(), ["firstName"])

    def test_explicit_null_reported_as_non_string(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_update({"city": None})
        self.assertEqual(ctx.exception.details, [
            {"field": "city", "message": "City must be a string"},
        ])


if __name__ == "__main__":
    unittest.main()
