"""Store module for e-commerce functionality.

Provides the catalog, per-user carts with live updates, checkout into
immutable orders, and store administration.
"""
