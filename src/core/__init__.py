"""Core domain package for pattern-mirror.

Core contains decoding, diffing, and cycle orchestration without any HTTP,
SQLite, or scheduler-specific code, keeping the sync logic portable.
"""
