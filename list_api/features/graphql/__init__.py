"""GraphQL API over saved items and tags (Strawberry on FastAPI)."""
