"""GUI state models."""
