"""Dependency-ordered provisioning pipeline."""
