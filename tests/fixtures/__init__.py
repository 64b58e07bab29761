"""Test fixtures package."""

from .fake_executor import FakeExecutor
from .tables import make_table, fk

__all__ = [
    "FakeExecutor",
    "make_table",
    "fk",
]
