"""Auth gateway helpers: current caller, role checks, sign in / out."""

from typing import Optional, Union

from src.models.profile import UserProfile, UserRole
from src.services.supabase_client import SupabaseGateway, first_row
from src.utils.errors import (
    AuthenticationRequiredError,
    AuthorizationError,
    InvalidRequestError,
    SupabaseError,
)
from src.utils.logging import get_structured_logger, mask_user_id

logger = get_structured_logger(__name__)

PROFILES_TABLE = "profiles"


def _role_satisfies(role: UserRole, required_role: UserRole) -> bool:
    # admin passes every check, agent passes agent and user checks
    if required_role == UserRole.ADMIN:
        return role == UserRole.ADMIN
    if required_role == UserRole.AGENT:
        return role in (UserRole.AGENT, UserRole.ADMIN)
    return True


async def get_profile(gateway: SupabaseGateway, user_id: str) -> Optional[UserProfile]:
    try:
        result = gateway.table(PROFILES_TABLE).select("*").eq("id", user_id).limit(1).execute()
    except Exception as e:
        raise SupabaseError(f"Failed to get profile: {e}") from e
    row = first_row(result)
    return UserProfile.model_validate(row) if row else None


async def get_current_user(gateway: SupabaseGateway, access_token: Optional[str]) -> Optional[UserProfile]:
    """Profile of the caller identified by a Supabase access token, or None."""
    if not access_token:
        return None

    try:
        response = gateway.auth.get_user(access_token)
    except Exception as e:
        # expired or forged tokens are treated as anonymous
        logger.info("Access token rejected", error=str(e))
        return None

    user = getattr(response, "user", None)
    if user is None:
        return None

    profile = await get_profile(gateway, user.id)
    if profile is None:
        logger.warning("Authenticated user has no profile", user_id=mask_user_id(user.id))
    return profile


async def require_auth(
    gateway: SupabaseGateway,
    access_token: Optional[str],
    required_role: Optional[Union[UserRole, str]] = None,
) -> UserProfile:
    """Current user, or a redirect error (/login when anonymous, / on wrong role)."""
    user = await get_current_user(gateway, access_token)
    if user is None:
        raise AuthenticationRequiredError("Sign in required")

    if required_role is not None and not _role_satisfies(user.role, UserRole(required_role)):
        logger.info(
            "Role check failed",
            user_id=mask_user_id(user.id),
            role=user.role.value,
            required_role=UserRole(required_role).value
        )
        raise AuthorizationError(f"{UserRole(required_role).value} role required")

    return user


async def check_role(gateway: SupabaseGateway, user_id: str, required_role: Union[UserRole, str]) -> bool:
    profile = await get_profile(gateway, user_id)
    if profile is None:
        return False
    return _role_satisfies(profile.role, UserRole(required_role))


async def sign_in(gateway: SupabaseGateway, email: str, password: str) -> dict:
    """Password sign-in; returns the session tokens for the client to keep."""
    try:
        response = gateway.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        logger.info("Sign in failed", error=str(e))
        raise InvalidRequestError("Invalid login credentials") from e

    session = getattr(response, "session", None)
    if session is None or response.user is None:
        raise InvalidRequestError("Invalid login credentials")

    logger.info("User signed in", user_id=mask_user_id(response.user.id))
    return {
        "user_id": response.user.id,
        "access_token": session.access_token,
        "refresh_token": session.refresh_token,
    }


async def sign_out(gateway: SupabaseGateway, access_token: str) -> None:
    """Revoke the caller's session server side."""
    try:
        gateway.auth.admin.sign_out(access_token)
    except Exception as e:
        raise SupabaseError(f"Failed to sign out: {e}") from e
    logger.info("User signed out")
