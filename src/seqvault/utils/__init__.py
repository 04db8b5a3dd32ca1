"""Small shared helpers: time, identifiers, hashing."""
