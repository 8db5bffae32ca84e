"""Service layer: model invocation, parsing, rendering and persistence."""
