"""Registered chat prompt versions."""

from . import v1  # noqa: F401
