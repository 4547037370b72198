"""Request authentication helpers.

Clients send the identity token issued by the authentication provider as
``Authorization: Bearer <token>``.
"""

from typing import Optional

from fastapi import Header, HTTPException, status

from atlas.adapter.error import AuthenticationError
from atlas.application.usecase.session import GetCurrentUserUseCase
from atlas.domain.model import AppUser


def bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """Extract the bearer token from the Authorization header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def optional_user(
    get_current_user_use_case: GetCurrentUserUseCase, token: Optional[str]
) -> Optional[AppUser]:
    """Resolve the signed-in user, or None when no token was sent.

    Raises:
        HTTPException: 401 if a token was sent but is invalid
    """
    try:
        return await get_current_user_use_case.execute(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=e.description
        )


async def require_user(
    get_current_user_use_case: GetCurrentUserUseCase,
    token: Optional[str],
    action: str = "perform this action",
) -> AppUser:
    """Resolve the signed-in user.

    Raises:
        HTTPException: 401 if no token was sent or it is invalid
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Authentication required to {action}",
        )
    user = await optional_user(get_current_user_use_case, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token",
        )
    return user
