"""Authenticated Graph reads decoded into schema types."""
