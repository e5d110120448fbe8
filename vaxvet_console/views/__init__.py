"""HTML rendering for the console screens."""
