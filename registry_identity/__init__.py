"""Registry account identity service."""
