"""Synthetic delimited test-file generator."""
