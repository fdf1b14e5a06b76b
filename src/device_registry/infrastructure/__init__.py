"""Infrastructure layer: persistence, HTTP API, authentication and messaging."""
