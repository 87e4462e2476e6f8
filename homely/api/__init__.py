"""HTTP API layer: routes, schemas, middleware and dependencies."""
