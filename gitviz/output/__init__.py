"""JSON and flattened text encoders."""
