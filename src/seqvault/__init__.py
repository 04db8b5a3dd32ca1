"""seqvault - chunked upload pipeline for sequence and show files.

Accepts large files in pieces, verifies every chunk, reassembles them,
validates the result, deduplicates by content hash and commits the
artifact to durable storage.
"""

from .__version__ import __version__

__all__ = ["__version__"]
