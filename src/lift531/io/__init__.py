"""File persistence and serialization."""
