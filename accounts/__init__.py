"""User-account management service."""
