"""Per-resource provisioning flows."""
