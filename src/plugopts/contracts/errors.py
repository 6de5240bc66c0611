"""Exceptions that cross the schema/engine boundary.

Two disjoint families:
- ConfigError: a malformed schema. Programmer mistake, raised at build time.
- ExternalCheckError: raised *by* an external check to fail with a message.
  The engine turns it into an error string; it never reaches the caller.

Bad input data is never an exception: it is reported through
ValidationResult.errors.
"""


class ConfigError(Exception):
    """Raised when a field rule or object schema is malformed."""

    pass


class ExternalCheckError(Exception):
    """Raised by an external check to report a failed validation.

    The exception message is used verbatim as the validation error.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
