# token_kernel/security/deps.py
from __future__ import annotations

from typing import Any, Optional

from fastapi import HTTPException, Request, status

from token_kernel.security.customer_token import CustomerToken


def get_customer_token(request: Request) -> Optional[CustomerToken]:
    """
    Access the CustomerToken restored by CustomerTokenMiddleware.
    None when the request carried no (valid) auth cookie.
    """
    return getattr(request.state, "customer_token", None)


def require_customer(request: Request) -> Any:
    """
    Return the authenticated customer id or raise 401.

    Usage:
        @router.get("/me")
        async def me(customer=Depends(require_customer)):
            ...
    """
    token = get_customer_token(request)
    customer = token.get_customer() if token is not None else None
    if customer is None:
        error = getattr(request.state, "token_error", None)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error.message if error is not None else "Not authenticated",
        )
    return customer
