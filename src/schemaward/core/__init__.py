"""Schema resolution, caching and diagnostic orchestration."""
