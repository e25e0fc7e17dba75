"""Core domain primitives shared across bounded contexts."""
