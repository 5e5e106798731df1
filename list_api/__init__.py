"""GraphQL service for a user's saved items and tags."""

__version__ = "1.0.0"
