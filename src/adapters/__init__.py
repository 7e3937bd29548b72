"""Adapters that implement the core ports (GitHub, SQLite, APScheduler)."""
