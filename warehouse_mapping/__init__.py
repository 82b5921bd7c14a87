"""Warehouse assignment rules for product inventory sourcing."""
