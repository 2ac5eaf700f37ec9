"""Repository access, parsing, configuration and section assembly."""
