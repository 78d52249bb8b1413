"""Test utilities package."""

from tests.utils.cleanup import cleanup_project_cascade

__all__ = [
    "cleanup_project_cascade",
]
