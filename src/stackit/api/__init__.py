"""HTTP API for StackIt."""
