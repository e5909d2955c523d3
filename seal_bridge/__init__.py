"""Superfiliate to Seal Subscriptions bridge and subscription proxy API."""

__version__ = "1.0.0"
