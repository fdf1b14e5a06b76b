"""Domain layer: entities, errors and the services holding registry logic."""
