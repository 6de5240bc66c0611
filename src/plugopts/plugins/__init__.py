"""Plugin hooks and the option schema registry."""

from plugopts.plugins.hookspecs import PROJECT_NAME, hookimpl, hookspec
from plugopts.plugins.manager import OptionsSchemaRegistry, SchemaSpec

__all__ = [
    "OptionsSchemaRegistry",
    "PROJECT_NAME",
    "SchemaSpec",
    "hookimpl",
    "hookspec",
]
