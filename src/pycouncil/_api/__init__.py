"""Endpoint functions for the council API (internal)."""
