"""Upload infrastructure adapters."""
