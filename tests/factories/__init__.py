"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import ProjectFactory, GoodsFactory
"""

from tests.factories.base import BaseFactory, utc_now
from tests.factories.goods import GoodsFactory
from tests.factories.project import ProjectFactory

__all__ = [
    "BaseFactory",
    "utc_now",
    "GoodsFactory",
    "ProjectFactory",
]
