"""Tests for infrastructure.persistence.validator module."""

import pytest

from infrastructure.persistence import Validator

RULES = {
    "name": [
        {"rule": "notEmpty", "message": "empty"},
        {"rule": "lengthBetween", "min": 4, "max": 20, "message": "length"},
    ],
    "i18n.name.it": [
        {"rule": "lengthBetween", "min": 4, "max": 20, "message": "length", "required": False},
    ],
}


@pytest.mark.unit
class TestValidator:
    """Tests for Validator.check."""

    def test_valid(self):
        """Valid data yields no errors."""
        data = {"name": "Richard", "i18n": {"name": {"it": "Riccardo"}}}
        assert Validator().check(data, RULES) == {}

    def test_missing_required_value(self):
        """A missing required value reports the first message only."""
        assert Validator().check({}, RULES) == {"name": ["empty"]}

    def test_optional_rules_skip_missing(self):
        """Optional rules ignore missing or None values."""
        data = {"name": "Richard", "i18n": {"name": {"it": None}}}
        assert Validator().check(data, RULES) == {}

    def test_present_value_checked(self):
        """Present values are checked by every rule."""
        data = {"name": "", "i18n": {"name": {"it": "Ric"}}}
        assert Validator().check(data, RULES) == {
            "name": ["empty", "length"],
            "i18n.name.it": ["length"],
        }

    @pytest.mark.parametrize(
        "rule,value,valid",
        [
            ({"rule": "inList", "list": ["a", "b"]}, "a", True),
            ({"rule": "inList", "list": ["a", "b"]}, "c", False),
            ({"rule": "numeric"}, "12.5", True),
            ({"rule": "numeric"}, "x", False),
            ({"rule": "numeric"}, True, False),
        ],
    )
    def test_builtin_rules(self, rule, value, valid):
        """Built-in rules behave as documented."""
        errors = Validator().check({"field": value}, {"field": [rule]})
        assert (errors == {}) is valid

    def test_custom_rule(self):
        """Custom rules can be registered."""
        validator = Validator()
        validator.add("upper", lambda value, rule: str(value).isupper())

        assert validator.check({"code": "ab"}, {"code": [{"rule": "upper"}]}) == {
            "code": ["code is invalid (upper)"]
        }

    def test_unknown_rule(self):
        """Unknown rule names raise ValueError."""
        with pytest.raises(ValueError):
            Validator().check({"name": "x"}, {"name": [{"rule": "nope"}]})
