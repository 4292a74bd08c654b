"""Infrastructure layer: persistence, spatial queries and notification delivery."""
