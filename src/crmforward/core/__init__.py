"""Core utilities: structured logging and JSON serialization."""
