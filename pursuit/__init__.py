"""Neon Pursuit: top-down vehicular chase simulation."""
