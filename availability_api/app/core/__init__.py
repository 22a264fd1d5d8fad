"""Core configuration, logging, errors and middleware."""
