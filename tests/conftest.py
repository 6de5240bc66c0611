# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/
"""

import os
from collections.abc import Iterator

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from plugopts.core.schema import ObjectSchema, SchemaBuilder

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


def example_options_schema(builder: SchemaBuilder) -> ObjectSchema:
    """The three-option schema used throughout plugin documentation."""
    return builder.schema(
        {
            "optionA": builder.boolean(required=True),
            "message": builder.string(required=True),
            "optionB": builder.boolean(),
        }
    )


@pytest.fixture
def builder() -> SchemaBuilder:
    """A fresh schema builder."""
    return SchemaBuilder()


@pytest.fixture
def example_schema(builder: SchemaBuilder) -> ObjectSchema:
    """optionA (boolean, required), message (string, required), optionB (boolean)."""
    return example_options_schema(builder)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo configure_logging() calls (the CLI makes them) between tests."""
    yield
    structlog.reset_defaults()
