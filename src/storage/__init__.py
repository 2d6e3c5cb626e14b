"""Persistence of provisioned resource records."""
