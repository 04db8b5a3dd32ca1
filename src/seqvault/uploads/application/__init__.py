"""Upload application layer: validators, commands, queries, services."""
