"""Domain layer: entities, value objects and errors."""
