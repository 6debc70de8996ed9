"""Domain layer: abstract record-store protocols."""
