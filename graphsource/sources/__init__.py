"""Per-resource-type sources. One module per AWS resource type."""
