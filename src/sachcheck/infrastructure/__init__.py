"""Infrastructure layer - provider, audio and HTTP adapters."""
