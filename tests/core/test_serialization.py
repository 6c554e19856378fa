"""Tests for conduit.core.serialization module."""

import json
from datetime import date, datetime
from decimal import Decimal

from conduit.core.errors import MissingRequiredAttribute
from conduit.core.serialization import json_default, to_json


class TestJsonDefault:
    """Test the json.dumps fallback encoder."""

    def test_conduit_errors_use_to_dict(self):
        error = MissingRequiredAttribute("AGE")
        assert json_default(error) == error.to_dict()

    def test_other_exceptions(self):
        assert json_default(ValueError("bad")) == {"error_type": "ValueError", "message": "bad"}

    def test_temporal_values_are_iso_formatted(self):
        assert json_default(date(2024, 1, 31)) == "2024-01-31"
        assert json_default(datetime(2024, 1, 31, 8, 30)) == "2024-01-31T08:30:00"

    def test_anything_else_is_stringified(self):
        assert json_default(Decimal("1.50")) == "1.50"


class TestToJson:
    def test_encodes_unsupported_values(self):
        payload = {"born": date(2024, 1, 31), "error": ValueError("bad")}
        assert json.loads(to_json(payload)) == {
            "born": "2024-01-31",
            "error": {"error_type": "ValueError", "message": "bad"},
        }

    def test_explicit_default_wins(self):
        assert to_json({"born": date(2024, 1, 31)}, default=lambda v: "x") == '{"born": "x"}'
