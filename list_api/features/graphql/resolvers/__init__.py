"""GraphQL resolvers, one module per feature."""
