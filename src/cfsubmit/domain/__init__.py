"""Domain layer: value objects, parsers and errors."""
