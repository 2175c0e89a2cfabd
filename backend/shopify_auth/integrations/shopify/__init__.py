"""Shopify platform helpers."""
