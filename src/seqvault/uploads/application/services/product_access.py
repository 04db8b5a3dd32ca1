"""Product access check.

ONLY product linkage authorization - a file may only be attached to a
product its uploader created.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from typing import Optional

from ...core.exceptions import UploadForbidden
from ...core.protocols import ProductOwnershipChecker

logger = logging.getLogger(__name__)


class ProductAccessPolicy:
    """Authorizes product linkage through a ProductOwnershipChecker.

    Without a checker no product linkage can be verified, so any declared
    product is refused.
    """

    def __init__(self, checker: Optional[ProductOwnershipChecker] = None):
        self._checker = checker

    async def ensure_can_attach(self, user_id: str, product_id: Optional[str]) -> None:
        """Raises UploadForbidden unless ``user_id`` owns ``product_id``."""
        if not product_id:
            return
        if self._checker is None or not await self._checker.is_owner(user_id, product_id):
            logger.warning(f"User {user_id} denied upload to product {product_id}")
            raise UploadForbidden.for_product(product_id)
