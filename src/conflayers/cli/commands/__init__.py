"""Top-level CLI commands (one module per command)."""
