"""Database engines, sessions and repositories."""
