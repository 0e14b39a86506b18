"""Search orchestration in front of a multi-entity search backend."""
