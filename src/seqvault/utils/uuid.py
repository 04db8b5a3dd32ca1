"""UUID utilities for seqvault."""

import uuid
import time


def generate_uuid_v7() -> str:
    """
    Generate a UUIDv7 with time-based ordering.

    Stored file ids are time-ordered so the metadata table's primary key
    index stays append-mostly.

    Returns:
        String representation of UUIDv7
    """
    timestamp_ms = int(time.time() * 1000)

    # 48 bits of timestamp, 80 bits of randomness
    timestamp_bytes = timestamp_ms.to_bytes(6, byteorder='big')
    random_bytes = uuid.uuid4().bytes[6:]
    uuid_bytes = timestamp_bytes + random_bytes

    # Version 7
    uuid_bytes = uuid_bytes[:6] + bytes([(uuid_bytes[6] & 0x0f) | 0x70]) + uuid_bytes[7:]
    # Variant 10
    uuid_bytes = uuid_bytes[:8] + bytes([(uuid_bytes[8] & 0x3f) | 0x80]) + uuid_bytes[9:]

    return str(uuid.UUID(bytes=uuid_bytes))


def is_valid_uuid(value: str) -> bool:
    """Check whether ``value`` parses as a UUID of any version."""
    try:
        uuid.UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        return False
    return True
