"""
Domain services.

Each service wraps a ``DocumentStore`` and raises ``DomainError`` subclasses
for rule violations; the API layer owns the HTTP translation.
"""

from foodcourt.services.menus import MenuCatalog
from foodcourt.services.orders import OrderEngine
from foodcourt.services.restaurants import RestaurantDirectory
from foodcourt.services.stats import RevenueAggregator, commission_split
from foodcourt.services.users import UserDirectory

__all__ = [
    "MenuCatalog",
    "OrderEngine",
    "RestaurantDirectory",
    "RevenueAggregator",
    "UserDirectory",
    "commission_split",
]
