"""Cross-cutting core pieces shared by every seqvault feature."""
