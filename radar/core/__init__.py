"""Core infrastructure: database, logging, security, errors."""
