"""Domain layer: value types and rules with no I/O."""
