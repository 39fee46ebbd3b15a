"""
                Foodcourt Ordering Backend

Multi-tenant food ordering: restaurants and their menus, customer orders
with price snapshots, and commission-split revenue reporting.
"""

__version__ = "1.0.0"
