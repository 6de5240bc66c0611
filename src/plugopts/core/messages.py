"""Jinja2-based error message templates.

Every validation error is rendered from a template. Defaults cover each
ErrorKind; plugin authors override them per field via ``messages``.

Templates see ``label`` (the field name). External-check templates also
see ``error`` and timeout templates see ``timeout``.

Example:
    template = MessageTemplate('"{{ label }}" was removed, use "optionB"')
    template.render(label="optionA")
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jinja2 import StrictUndefined, TemplateSyntaxError, UndefinedError
from jinja2.exceptions import SecurityError
from jinja2.sandbox import SandboxedEnvironment

from plugopts.contracts import ErrorKind

DEFAULT_MESSAGES: Mapping[ErrorKind, str] = {
    ErrorKind.REQUIRED: '"{{ label }}" is required',
    ErrorKind.FORBIDDEN: '"{{ label }}" is no longer supported',
    ErrorKind.BOOLEAN_BASE: '"{{ label }}" must be a boolean',
    ErrorKind.STRING_BASE: '"{{ label }}" must be a string',
    ErrorKind.NUMBER_BASE: '"{{ label }}" must be a number',
    ErrorKind.OBJECT_BASE: '"{{ label }}" must be of type object',
    ErrorKind.ARRAY_BASE: '"{{ label }}" must be an array',
    ErrorKind.UNKNOWN_KEY: '"{{ label }}" is not allowed',
    ErrorKind.EXTERNAL: (
        '"{{ label }}" failed external validation'
        "{% if error %}: {{ error }}{% endif %}"
    ),
    ErrorKind.TIMEOUT: '"{{ label }}" external check timed out after {{ timeout }}s',
}

# Shared: templates are compiled once per rule and the environment is stateless
_ENV = SandboxedEnvironment(
    undefined=StrictUndefined,
    autoescape=False,
)


class TemplateError(Exception):
    """Error in message template compilation or rendering."""


class MessageTemplate:
    """A compiled, sandboxed message template."""

    def __init__(self, source: str) -> None:
        """Compile a template.

        Args:
            source: Jinja2 template string

        Raises:
            TemplateError: If template syntax is invalid
        """
        self._source = source
        try:
            self._template = _ENV.from_string(source)
        except TemplateSyntaxError as e:
            raise TemplateError(f"Invalid message template {source!r}: {e}") from e

    @property
    def source(self) -> str:
        """The uncompiled template string."""
        return self._source

    def render(self, **variables: Any) -> str:
        """Render the template.

        Raises:
            TemplateError: On undefined variables or sandbox violations
        """
        try:
            return self._template.render(**variables)
        except UndefinedError as e:
            raise TemplateError(f"Undefined variable in {self._source!r}: {e}") from e
        except SecurityError as e:
            raise TemplateError(f"Sandbox violation in {self._source!r}: {e}") from e

    def __repr__(self) -> str:
        return f"MessageTemplate({self._source!r})"


_DEFAULT_TEMPLATES: dict[ErrorKind, MessageTemplate] = {
    kind: MessageTemplate(source) for kind, source in DEFAULT_MESSAGES.items()
}

# Variables each kind is rendered with, beyond ``label``
_KIND_VARIABLES: dict[ErrorKind, dict[str, Any]] = {
    ErrorKind.EXTERNAL: {"error": "probe"},
    ErrorKind.TIMEOUT: {"timeout": 1.0},
}


def compile_messages(messages: Mapping[str, str]) -> dict[ErrorKind, MessageTemplate]:
    """Compile a rule's custom messages.

    Args:
        messages: Mapping of error kind (e.g. "any.required") to template

    Returns:
        Mapping of ErrorKind to compiled template

    Raises:
        ValueError: If a key is not a known error kind
        TemplateError: If a template does not compile, or references a
            variable its kind is never rendered with
    """
    compiled: dict[ErrorKind, MessageTemplate] = {}
    for key, source in messages.items():
        try:
            kind = ErrorKind(key)
        except ValueError:
            known = ", ".join(k.value for k in ErrorKind)
            raise ValueError(
                f"Unknown message kind '{key}'. Known kinds: {known}"
            ) from None
        template = MessageTemplate(source)
        # Probe render so bad variable references fail at schema build time
        template.render(label="probe", **_KIND_VARIABLES.get(kind, {}))
        compiled[kind] = template
    return compiled


def render_message(
    kind: ErrorKind,
    label: str,
    overrides: Mapping[ErrorKind, MessageTemplate] | None = None,
    **variables: Any,
) -> str:
    """Render the message for ``kind``, preferring a per-field override.

    Args:
        kind: The error kind being reported
        label: Field (or unknown key) name
        overrides: The rule's compiled custom messages, if any
        **variables: Extra template variables (error, timeout)

    Returns:
        Display-ready error string
    """
    if overrides and kind in overrides:
        template = overrides[kind]
    else:
        template = _DEFAULT_TEMPLATES[kind]
    return template.render(label=label, **variables)
