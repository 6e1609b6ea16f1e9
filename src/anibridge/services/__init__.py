"""Network-facing services: HTTP, caching, catalog, metadata and recommendations."""
