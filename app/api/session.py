from fastapi import APIRouter, Depends

from app.api.deps import get_db, get_role_service
from app.core.security import get_access_token, get_current_user, get_session_context
from app.models.api_models import MessageResponse, ProfileResponse, SessionInfo
from app.models.db_models import AuthUser, Profile
from app.services.role_service import RoleService
from app.services.session_context import SessionContext

router = APIRouter()


@router.get("/me", response_model=SessionInfo)
async def whoami(
    user: AuthUser = Depends(get_current_user),
    roles: RoleService = Depends(get_role_service),
    ctx: SessionContext = Depends(get_session_context),
):
    # Admin status is derived fresh on every call, never remembered across sessions
    is_admin = await ctx.guarded(user.id, roles.is_admin(user.id))
    return SessionInfo(user_id=user.id, email=user.email, is_admin=is_admin)


@router.get("/me/profile", response_model=ProfileResponse)
async def my_profile(user: AuthUser = Depends(get_current_user), db=Depends(get_db)):
    """Profile for pre-filling the pickup address. A missing profile is not an error."""
    row = await db.get_profile(user.id)
    return ProfileResponse(profile=Profile(**row) if row else None)


@router.post("/auth/logout", response_model=MessageResponse)
async def logout(
    user: AuthUser = Depends(get_current_user),
    access_token: str = Depends(get_access_token),
    ctx: SessionContext = Depends(get_session_context),
):
    await ctx.sign_out(access_token, user.id)
    return MessageResponse(message="Signed out")
