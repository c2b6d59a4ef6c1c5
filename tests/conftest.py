"""Shared pytest fixtures for Slope tests."""

from pathlib import Path

import pytest

from slope.core.expression_lang import Environment, new_environment


@pytest.fixture
def env() -> Environment:
    """Return a fresh root environment with the builtins installed."""
    return new_environment()


@pytest.fixture
def examples_dir() -> Path:
    """Return path to the bundled example programs."""
    return Path(__file__).parent.parent / "examples"
