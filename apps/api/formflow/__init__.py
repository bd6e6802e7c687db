"""Form submission post-processing service."""
