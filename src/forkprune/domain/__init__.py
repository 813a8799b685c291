"""Domain layer: fork branches, pull requests and the cleanup pipeline."""
