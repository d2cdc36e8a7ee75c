"""Senatus test suite."""
