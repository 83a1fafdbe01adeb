"""Infrastructure layer - serial hardware access."""
