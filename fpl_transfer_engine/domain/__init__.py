"""Domain layer: models, repositories and optimization services."""
