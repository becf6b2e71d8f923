"""JSON HTTP API for renderers and coaching front-ends."""
