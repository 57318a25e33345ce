"""API package: configuration, providers, services and the HTTP surface."""
