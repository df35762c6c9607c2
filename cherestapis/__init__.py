"""Read-only Che workspace REST API for a single workspace."""
