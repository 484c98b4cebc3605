"""Image operations: tessellate, resize, reorient and summary."""
