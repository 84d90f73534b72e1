"""Domain layer: canonical model, normalization, reconciliation and jobs."""
