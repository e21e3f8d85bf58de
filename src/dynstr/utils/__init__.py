"""Utility modules for dynstr."""
