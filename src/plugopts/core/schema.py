# src/plugopts/core/schema.py
"""Declarative option schemas for plugins.

A plugin declares its options as an ObjectSchema: an ordered mapping of
option name to FieldRule, plus a policy for keys it does not declare.

Rules are built from an options mapping rather than a chain of method
calls. The mapping is parsed by a strict Pydantic model so typos and
contradictory settings fail immediately with ConfigError:

    schema = define_object({
        "optionA": define_field("boolean", {"required": True}),
        "message": define_field("string", {"default": "default message"}),
        "optionB": define_field("boolean", description="Enables B"),
    })

Schema factories receive a SchemaBuilder instead of importing these
functions, so the same factory works with any builder the host injects:

    def plugin_options_schema(builder: SchemaBuilder) -> ObjectSchema:
        return builder.schema({"optionA": builder.boolean(required=True)})
"""

import math
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)

from plugopts.contracts import ConfigError, ErrorKind, FieldType, UnknownFieldPolicy
from plugopts.core.canonical import stable_hash
from plugopts.core.messages import (
    MessageTemplate,
    TemplateError,
    compile_messages,
    render_message,
)

# An external check receives the field's resolved value and a read-only
# snapshot of the whole resolved record. It may be sync or async.
# Success: None or True. Failure: False, a message string, or raising
# ExternalCheckError.
ExternalCheck = Callable[[Any, Mapping[str, Any]], Any]


class _Missing:
    """Sentinel type for "no default declared"."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Missing":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "_Missing":
        return self


MISSING: Any = _Missing()


def matches_type(field_type: FieldType, value: Any) -> bool:
    """Check a value against a field type.

    bool is a subclass of int in Python, so booleans are explicitly
    excluded from "number". Non-finite floats are not numbers either.
    """
    if field_type is FieldType.BOOLEAN:
        return isinstance(value, bool)
    if field_type is FieldType.STRING:
        return isinstance(value, str)
    if field_type is FieldType.NUMBER:
        if isinstance(value, bool):
            return False
        if isinstance(value, float):
            return math.isfinite(value)
        return isinstance(value, int)
    if field_type is FieldType.OBJECT:
        return isinstance(value, Mapping)
    if field_type is FieldType.ARRAY:
        return isinstance(value, (list, tuple))
    raise AssertionError(f"unhandled field type: {field_type!r}")


class FieldOptions(BaseModel):
    """Parsed and cross-checked options for one field rule.

    Unknown option keys are rejected so a misspelt "requried" cannot
    silently produce an optional field.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    type: FieldType
    required: StrictBool = False
    default: Any = MISSING
    forbidden: StrictBool = False
    description: StrictStr | None = None
    messages: dict[StrictStr, StrictStr] = Field(default_factory=dict)
    external: Callable[..., Any] | None = None

    @field_validator("messages")
    @classmethod
    def validate_messages(cls, v: dict[str, str]) -> dict[str, str]:
        """Message keys must be known error kinds and templates must compile."""
        try:
            compile_messages(v)
        except TemplateError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def validate_flag_combinations(self) -> "FieldOptions":
        """Reject contradictory required/forbidden/default settings."""
        has_default = self.default is not MISSING
        if self.required and self.forbidden:
            raise ValueError("a field cannot be both required and forbidden")
        if self.required and has_default:
            raise ValueError(
                "a required field cannot declare a default (the value must be supplied)"
            )
        if self.forbidden and has_default:
            raise ValueError("a forbidden field cannot declare a default")
        if has_default and not matches_type(self.type, self.default):
            raise ValueError(
                f"default {self.default!r} does not match field type '{self.type.value}'"
            )
        return self


@dataclass(frozen=True)
class FieldRule:
    """Validation rule for one named option.

    Build with define_field() (or a SchemaBuilder); direct construction
    skips option checking.
    """

    type: FieldType
    required: bool = False
    default: Any = MISSING
    forbidden: bool = False
    description: str | None = None
    messages: Mapping[ErrorKind, MessageTemplate] = field(
        default_factory=lambda: MappingProxyType({})
    )
    external: ExternalCheck | None = None

    @property
    def has_default(self) -> bool:
        """Whether a default value was declared."""
        return self.default is not MISSING

    @property
    def type_error_kind(self) -> ErrorKind:
        """The ``<type>.base`` kind reported on a type mismatch."""
        return ErrorKind.type_error_for(self.type)

    def message(self, kind: ErrorKind, label: str, **variables: Any) -> str:
        """Render the message for ``kind``, honouring custom overrides."""
        return render_message(kind, label, self.messages, **variables)

    def describe(self) -> dict[str, Any]:
        """JSON-safe description of the rule, for docs and fingerprints."""
        description: dict[str, Any] = {
            "type": self.type.value,
            "required": self.required,
            "forbidden": self.forbidden,
        }
        if self.description is not None:
            description["description"] = self.description
        if self.has_default:
            description["default"] = self.default
        if self.messages:
            description["messages"] = {
                kind.value: template.source for kind, template in self.messages.items()
            }
        description["external"] = self.external is not None
        return description


def define_field(
    type: FieldType | str,
    options: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> FieldRule:
    """Define a validation rule for one option.

    Args:
        type: Expected type ("boolean", "string", "number", "object", "array")
        options: Mapping of rule options (required, default, forbidden,
            description, messages, external)
        **kwargs: Same options as keywords; they win over ``options``

    Returns:
        Immutable FieldRule

    Raises:
        ConfigError: On unknown options, contradictory flags, a default of the
            wrong type, or invalid message templates
    """
    if options is not None and not isinstance(options, Mapping):
        raise ConfigError(
            f"Field options must be a mapping, got {options.__class__.__name__}"
        )
    merged = {**(options or {}), **kwargs}
    if "type" in merged:
        raise ConfigError("'type' is passed positionally, not as an option")

    try:
        parsed = FieldOptions.model_validate({"type": type, **merged})
    except ValidationError as e:
        raise ConfigError(f"Invalid field rule: {e}") from e

    return FieldRule(
        type=parsed.type,
        required=parsed.required,
        default=parsed.default,
        forbidden=parsed.forbidden,
        description=parsed.description,
        messages=MappingProxyType(compile_messages(parsed.messages)),
        external=parsed.external,
    )


@dataclass(frozen=True)
class ObjectSchema:
    """Ordered set of field rules for one options record.

    Declaration order is the order errors are reported in.
    Build with define_object().
    """

    fields: Mapping[str, FieldRule]
    unknown: UnknownFieldPolicy = UnknownFieldPolicy.REJECT

    def __iter__(self) -> Iterator[tuple[str, FieldRule]]:
        return iter(self.fields.items())

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def get(self, name: str) -> FieldRule | None:
        """Get a field rule by name."""
        return self.fields.get(name)

    @property
    def field_names(self) -> tuple[str, ...]:
        """Declared field names, in declaration order."""
        return tuple(self.fields)

    @property
    def has_external_checks(self) -> bool:
        """Whether any field declares an external check."""
        return any(rule.external is not None for rule in self.fields.values())

    def append(
        self,
        fields: Mapping[str, FieldRule] | Iterable[tuple[str, FieldRule]],
    ) -> "ObjectSchema":
        """Return a new schema with extra fields declared after the existing ones.

        Raises:
            ConfigError: If a name is already declared
        """
        return define_object(
            [*self.fields.items(), *_field_pairs(fields)],
            unknown=self.unknown,
        )

    def describe(self) -> dict[str, Any]:
        """JSON-safe description of the schema."""
        return {
            "type": "object",
            "unknown": self.unknown.value,
            "fields": {name: rule.describe() for name, rule in self.fields.items()},
        }

    @property
    def fingerprint(self) -> str:
        """Stable SHA-256 of describe(), for detecting schema changes.

        External checks contribute only their presence, not their identity.
        """
        return stable_hash(self.describe())


def _field_pairs(
    fields: Mapping[str, FieldRule] | Iterable[tuple[str, FieldRule]],
) -> list[tuple[str, FieldRule]]:
    if isinstance(fields, Mapping):
        return list(fields.items())
    try:
        return [(name, rule) for name, rule in fields]
    except (TypeError, ValueError) as e:
        raise ConfigError(
            "Fields must be a mapping or an iterable of (name, rule) pairs"
        ) from e


def define_object(
    fields: Mapping[str, FieldRule] | Iterable[tuple[str, FieldRule]],
    unknown: UnknownFieldPolicy | str = UnknownFieldPolicy.REJECT,
) -> ObjectSchema:
    """Assemble field rules into an ObjectSchema.

    Args:
        fields: Mapping of name to FieldRule, or (name, rule) pairs when the
            schema is assembled incrementally
        unknown: Policy for undeclared input keys ("reject", "allow", "strip")

    Returns:
        Immutable ObjectSchema

    Raises:
        ConfigError: On duplicate or invalid names, values that are not
            FieldRules, or an unknown policy
    """
    try:
        policy = UnknownFieldPolicy(unknown)
    except ValueError:
        allowed = ", ".join(p.value for p in UnknownFieldPolicy)
        raise ConfigError(
            f"Unknown field policy '{unknown}'. Expected one of: {allowed}"
        ) from None

    collected: dict[str, FieldRule] = {}
    for name, rule in _field_pairs(fields):
        if not isinstance(name, str) or not name:
            raise ConfigError(f"Field names must be non-empty strings, got {name!r}")
        if name in collected:
            raise ConfigError(f"Duplicate field name: '{name}'")
        if not isinstance(rule, FieldRule):
            raise ConfigError(
                f"Field '{name}' must be a FieldRule (use define_field), "
                f"got {rule.__class__.__name__}"
            )
        collected[name] = rule

    return ObjectSchema(fields=MappingProxyType(collected), unknown=policy)


class SchemaBuilder:
    """Builder primitives injected into plugin schema factories.

    Stateless; one instance can be shared freely.

    Usage:
        def plugin_options_schema(builder):
            return builder.schema({
                "apiKey": builder.string(required=True, external=verify_key),
                "legacyMode": builder.boolean(
                    forbidden=True,
                    messages={"any.unknown": "legacyMode was removed in v2"},
                ),
            })
    """

    FieldType = FieldType
    UnknownFieldPolicy = UnknownFieldPolicy

    def field(
        self,
        type: FieldType | str,
        options: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> FieldRule:
        """Define a field rule. See define_field()."""
        return define_field(type, options, **kwargs)

    def schema(
        self,
        fields: Mapping[str, FieldRule] | Iterable[tuple[str, FieldRule]],
        unknown: UnknownFieldPolicy | str = UnknownFieldPolicy.REJECT,
    ) -> ObjectSchema:
        """Assemble an object schema. See define_object()."""
        return define_object(fields, unknown=unknown)

    def boolean(self, **options: Any) -> FieldRule:
        return define_field(FieldType.BOOLEAN, options)

    def string(self, **options: Any) -> FieldRule:
        return define_field(FieldType.STRING, options)

    def number(self, **options: Any) -> FieldRule:
        return define_field(FieldType.NUMBER, options)

    def object(self, **options: Any) -> FieldRule:
        return define_field(FieldType.OBJECT, options)

    def array(self, **options: Any) -> FieldRule:
        return define_field(FieldType.ARRAY, options)
