"""Product ownership protocol.

ONLY product ownership contract - answers whether a user may attach files
to a product in the catalog.

Following maximum separation architecture - one file = one purpose.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ProductOwnershipChecker(Protocol):
    """Product ownership protocol."""

    async def is_owner(self, user_id: str, product_id: str) -> bool:
        """True when ``user_id`` created ``product_id``."""
        ...
