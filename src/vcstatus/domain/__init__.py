"""Domain layer: record model, reconciliation core and ports."""
