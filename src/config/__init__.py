"""Typed application settings."""
