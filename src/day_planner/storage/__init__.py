"""Backends implementing TaskStoreAdapter (local SQLite records, remote web app)."""
