"""Adaptive "test your level" assessment bot."""
