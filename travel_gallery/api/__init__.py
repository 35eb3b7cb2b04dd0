"""HTTP API for the gallery."""
