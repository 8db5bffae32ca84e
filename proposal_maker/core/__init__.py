"""Core infrastructure: database, encryption, security, logging."""
