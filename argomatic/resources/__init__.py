"""Package data: bundled default settings."""
