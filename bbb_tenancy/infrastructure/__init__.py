"""Infrastructure: cache backends and outbound HTTP clients."""
