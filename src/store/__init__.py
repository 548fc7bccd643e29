"""MongoDB access layer: session lifecycle and per-collection operations."""
