"""Structured logging with run and step context."""
