"""Rights marketplace core."""
