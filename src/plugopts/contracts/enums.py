# src/plugopts/contracts/enums.py
"""Field types, unknown-key policies, and error kinds.

Error kinds double as the keys plugin authors use to override messages,
so their string values are part of the public contract.
"""

from enum import Enum


class FieldType(str, Enum):
    """Expected type of a single option value.

    Uses (str, Enum) so schema authors can pass plain strings
    ("boolean", "string", ...) wherever a FieldType is accepted.
    """

    BOOLEAN = "boolean"
    STRING = "string"
    NUMBER = "number"
    OBJECT = "object"
    ARRAY = "array"


class UnknownFieldPolicy(str, Enum):
    """What to do with input keys the schema does not declare.

    Values:
        REJECT: One error per unknown key
        ALLOW: Pass unknown keys through (a warning is recorded for each)
        STRIP: Drop unknown keys from the resolved record silently
    """

    REJECT = "reject"
    ALLOW = "allow"
    STRIP = "strip"


class ErrorKind(str, Enum):
    """Kinds of validation failure.

    The value is the key used in a rule's ``messages`` mapping.
    """

    REQUIRED = "any.required"
    FORBIDDEN = "any.unknown"
    BOOLEAN_BASE = "boolean.base"
    STRING_BASE = "string.base"
    NUMBER_BASE = "number.base"
    OBJECT_BASE = "object.base"
    ARRAY_BASE = "array.base"
    UNKNOWN_KEY = "object.unknown"
    EXTERNAL = "any.external"
    TIMEOUT = "any.timeout"

    @classmethod
    def type_error_for(cls, field_type: FieldType) -> "ErrorKind":
        """Return the ``<type>.base`` kind for a field type."""
        return cls(f"{field_type.value}.base")
