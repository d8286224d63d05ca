from __future__ import annotations

from typing import Optional

from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import AuthContext


def require_context(ctx: Optional[AuthContext]) -> AuthContext:
    if ctx is None:
        raise AuthenticationError("Please log in to continue")
    return ctx


def require_admin(ctx: Optional[AuthContext]) -> AuthContext:
    ctx = require_context(ctx)
    if not ctx.is_admin:
        raise AuthorizationError("Administrator access required")
    return ctx


def require_self(ctx: Optional[AuthContext], employee_id: str) -> AuthContext:
    """Employee self-service: the caller's own id must match the target."""
    ctx = require_context(ctx)
    if ctx.is_admin or ctx.principal_id != employee_id:
        raise AuthorizationError("You can only act on your own records")
    return ctx


def require_self_or_admin(ctx: Optional[AuthContext], employee_id: str) -> AuthContext:
    ctx = require_context(ctx)
    if not ctx.is_admin and ctx.principal_id != employee_id:
        raise AuthorizationError("You can only act on your own records")
    return ctx
