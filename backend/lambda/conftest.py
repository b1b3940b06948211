"""Make the shared layer and the Lambda directories importable the way the
Lambda runtime lays them out (layer on /opt/python, function code at root)."""

from __future__ import annotations

import os
import sys

_HERE = os.path.dirname(os.path.abspath(__file__))

for _path in (
    os.path.join(_HERE, "shared_layer", "python"),
    os.path.join(_HERE, "customer_api"),
):
    if _path not in sys.path:
        sys.path.insert(0, _path)
