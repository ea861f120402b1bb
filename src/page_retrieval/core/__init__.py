"""Cross-cutting infrastructure: exception hierarchy and logging setup."""
