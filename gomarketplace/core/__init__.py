"""Core configuration, errors and helpers for the cart."""
