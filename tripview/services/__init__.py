"""Service layer: data loading and caching."""
