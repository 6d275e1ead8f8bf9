"""Chat transport adapters."""
