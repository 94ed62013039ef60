"""Email delivery providers."""
