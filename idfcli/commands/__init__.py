"""Command handlers. Each takes the shared options and its trailing args."""
