"""Business logic services for the StackIt application."""
