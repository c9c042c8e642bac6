"""Job filtering, template resolution, prompting and the per-job pipeline."""
