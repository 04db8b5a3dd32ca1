"""Upload domain: entities, value objects, exceptions and protocols."""
