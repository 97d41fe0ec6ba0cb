"""Typed models for tokens, users and wire records."""
