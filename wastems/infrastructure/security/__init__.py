"""Token and password primitives."""
