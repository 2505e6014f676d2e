"""Bike storefront: catalog queries, inventory ledger, carts and orders."""

__version__ = "1.0.0"
