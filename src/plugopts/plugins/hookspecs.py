"""pluggy hook specifications for plugin option schemas.

Plugins implement these hooks to declare the options they accept.
The registry calls them, injecting a SchemaBuilder.

Usage (implementing a plugin):
    from plugopts.plugins.hookspecs import hookimpl

    class MyPlugin:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def plugopts_plugin_options_schema(self, builder):
            return {
                "my-plugin": builder.schema({"apiKey": builder.string(required=True)}),
            }

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks plugin implementations of those hooks.
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from plugopts.core.schema import ObjectSchema, SchemaBuilder

# Project name for pluggy
PROJECT_NAME = "plugopts"

# Hook specification marker
hookspec = pluggy.HookspecMarker(PROJECT_NAME)

# Hook implementation marker (for plugins to use)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class PlugoptsSchemaSpec:
    """Hook specifications for option schema declarations."""

    @hookspec
    def plugopts_plugin_options_schema(
        self, builder: "SchemaBuilder"
    ) -> dict[str, "ObjectSchema"]:  # type: ignore[empty-body]
        """Return option schemas keyed by plugin name.

        Args:
            builder: Schema builder primitives to construct schemas with

        Returns:
            Mapping of plugin name to ObjectSchema
        """
