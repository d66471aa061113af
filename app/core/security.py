from typing import Optional
from fastapi import Header, Depends

from app.core.errors import AuthenticationRequired
from app.models.db_models import AuthUser
from app.services.session_context import SessionContext, session_context


def get_session_context() -> SessionContext:
    return session_context


async def get_access_token(authorization: str = Header(None)) -> Optional[str]:
    """
    Extracts the Supabase access token from `Authorization: Bearer <token>`.
    The token itself is only ever checked by Supabase auth.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_user(
    access_token: Optional[str] = Depends(get_access_token),
    ctx: SessionContext = Depends(get_session_context),
) -> AuthUser:
    user = await ctx.current_user(access_token)
    if not user:
        raise AuthenticationRequired()
    return user
