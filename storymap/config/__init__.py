"""Static configuration — materials, sizes, machine settings and environment."""
