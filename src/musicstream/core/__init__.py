"""Core infrastructure: configuration, logging and the SQLite store."""
