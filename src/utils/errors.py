"""Error handling utilities."""

from typing import Optional


class MarketplaceError(Exception):
    """Base exception for the marketplace backend."""
    pass


class SupabaseError(MarketplaceError):
    """Supabase operation error."""
    pass


class StorageError(MarketplaceError):
    """Object storage operation error."""
    pass


class NotFoundError(MarketplaceError):
    """Referenced row does not exist."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} not found: {resource_id}")
        self.resource = resource
        self.resource_id = resource_id


class InvalidRequestError(MarketplaceError):
    """Request payload or parameters are invalid."""
    pass


class RedirectError(MarketplaceError):
    """Error that the web layer answers with a redirect instead of an error page."""

    redirect_to: str = "/"

    def __init__(self, message: str, redirect_to: Optional[str] = None):
        super().__init__(message)
        if redirect_to is not None:
            self.redirect_to = redirect_to


class AuthenticationRequiredError(RedirectError):
    """No signed-in user."""

    redirect_to = "/login"


class AuthorizationError(RedirectError):
    """Signed-in user has the wrong role for the operation."""

    redirect_to = "/"


class ProfileSetupRequiredError(RedirectError):
    """Agent-role user without an agent identity."""

    redirect_to = "/agent"
