"""Core infrastructure: configuration, logging, database, exceptions."""
