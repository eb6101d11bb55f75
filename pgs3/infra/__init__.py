"""Infrastructure adapters (database pool, logging)."""
