"""Integration tests with a real database and the HTTP API."""
