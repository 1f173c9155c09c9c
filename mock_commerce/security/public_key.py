"""
Public key check

Requests must carry the store public key in ``X-Authorization`` when
``COMMERCE_PUBLIC_KEY`` is set. With no key configured every request is
accepted.
"""

import os
import logging
from typing import Optional

from fastapi import Header

from ..errors import CommerceError

logger = logging.getLogger(__name__)


async def require_public_key(x_authorization: Optional[str] = Header(None)) -> Optional[str]:
    expected = os.getenv("COMMERCE_PUBLIC_KEY")
    if not expected:
        return None

    if x_authorization != expected:
        logger.warning("Rejected request with missing or invalid public key")
        raise CommerceError(
            status_code=401,
            error_type="authentication_error",
            message="A valid public key must be provided in X-Authorization",
        )
    return x_authorization
