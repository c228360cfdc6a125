"""Presentation layer for keygate_identity."""
