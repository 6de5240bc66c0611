# src/plugopts/contracts/results.py
"""Validation outcomes.

These types answer: "Did the options match the schema, and what came out?"

IMPORTANT:
- errors and warnings are tuples of display-ready strings, in schema order
- value is only populated when is_valid is True
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating one options record against an ObjectSchema.

    Use the factory methods to create instances.
    """

    is_valid: bool
    errors: tuple[str, ...]
    value: dict[str, Any] | None
    warnings: tuple[str, ...] = ()

    @property
    def has_warnings(self) -> bool:
        """Whether any warnings were recorded."""
        return bool(self.warnings)

    @classmethod
    def success(
        cls,
        value: dict[str, Any],
        warnings: tuple[str, ...] = (),
    ) -> "ValidationResult":
        """Create a successful result carrying the resolved record."""
        return cls(is_valid=True, errors=(), value=value, warnings=warnings)

    @classmethod
    def failure(
        cls,
        errors: list[str] | tuple[str, ...],
        warnings: tuple[str, ...] = (),
    ) -> "ValidationResult":
        """Create a failed result. ``errors`` must not be empty."""
        if not errors:
            raise ValueError("failure result requires at least one error")
        return cls(is_valid=False, errors=tuple(errors), value=None, warnings=warnings)


@dataclass(frozen=True)
class SchemaTestResult:
    """What the schema test helper exposes to plugin test suites.

    Deliberately omits the resolved value: tests assert on the
    validity flag and the exact error strings.
    """

    is_valid: bool
    errors: tuple[str, ...]
    warnings: tuple[str, ...] = ()

    @property
    def has_warnings(self) -> bool:
        """Whether any warnings were recorded."""
        return bool(self.warnings)

    @classmethod
    def from_result(cls, result: ValidationResult) -> "SchemaTestResult":
        """Project a ValidationResult down to the test-facing fields."""
        return cls(
            is_valid=result.is_valid,
            errors=result.errors,
            warnings=result.warnings,
        )
