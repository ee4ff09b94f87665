"""Paths, messages and runtime settings for antigravity-settings."""
