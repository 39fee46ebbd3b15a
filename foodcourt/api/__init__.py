"""
HTTP API routers.
"""

from foodcourt.api import admin, menus, orders, payments, restaurants, users

routers = [
    restaurants.router,
    menus.router,
    orders.router,
    payments.router,
    users.router,
    admin.router,
]

__all__ = ["routers"]
