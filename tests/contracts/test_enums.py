"""Tests for contract enums."""

import pytest


class TestFieldType:
    """FieldType accepts plain strings."""

    def test_values(self) -> None:
        from plugopts.contracts import FieldType

        assert {t.value for t in FieldType} == {
            "boolean",
            "string",
            "number",
            "object",
            "array",
        }

    def test_constructs_from_string(self) -> None:
        from plugopts.contracts import FieldType

        assert FieldType("boolean") is FieldType.BOOLEAN

    def test_unknown_type_rejected(self) -> None:
        from plugopts.contracts import FieldType

        with pytest.raises(ValueError):
            FieldType("integer")


class TestErrorKind:
    """ErrorKind values are the message override keys."""

    def test_required_and_forbidden_keys(self) -> None:
        from plugopts.contracts import ErrorKind

        assert ErrorKind.REQUIRED.value == "any.required"
        assert ErrorKind.FORBIDDEN.value == "any.unknown"

    @pytest.mark.parametrize(
        ("field_type", "expected"),
        [
            ("boolean", "boolean.base"),
            ("string", "string.base"),
            ("number", "number.base"),
            ("object", "object.base"),
            ("array", "array.base"),
        ],
    )
    def test_type_error_for(self, field_type: str, expected: str) -> None:
        from plugopts.contracts import ErrorKind, FieldType

        assert ErrorKind.type_error_for(FieldType(field_type)).value == expected


class TestUnknownFieldPolicy:
    def test_values(self) -> None:
        from plugopts.contracts import UnknownFieldPolicy

        assert UnknownFieldPolicy("reject") is UnknownFieldPolicy.REJECT
        assert UnknownFieldPolicy("allow") is UnknownFieldPolicy.ALLOW
        assert UnknownFieldPolicy("strip") is UnknownFieldPolicy.STRIP
