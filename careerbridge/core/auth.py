"""
Authentication dependencies and the access guard.

Provides:
- get_session: the single place a bearer token becomes a Session
- evaluate_access: pure guard decision (allow / redirect to auth / redirect home)
- require_roles: FastAPI dependency factory enforcing the guard on a route
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.database import Database

from careerbridge.db.mongodb import get_database
from careerbridge.models import UserRole
from careerbridge.services.identity_service import IdentityGateway
from careerbridge.services.mongo_service import UserService
from careerbridge.services.role_service import ANONYMOUS, RoleResolver, Session

# Bearer token extractor; anonymous callers are allowed through to the guard
bearer_scheme = HTTPBearer(auto_error=False)

AUTH_ENTRY_POINT = "/auth"
HOME = "/"


class AccessOutcome(str, Enum):
    allow = "allow"
    redirect_auth = "redirect_auth"
    redirect_home = "redirect_home"


@dataclass(frozen=True)
class AccessDecision:
    outcome: AccessOutcome
    location: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.outcome == AccessOutcome.allow


def evaluate_access(session: Session, allowed_roles: Optional[Iterable[UserRole]] = None) -> AccessDecision:
    """
    Decide whether a caller may reach a guarded screen.

    - no identity -> redirect to the auth entry point
    - role not in allowed_roles (when given) -> redirect home
    - otherwise allow
    """
    if not session.is_authenticated:
        return AccessDecision(AccessOutcome.redirect_auth, AUTH_ENTRY_POINT)
    if allowed_roles is not None:
        allowed = {UserRole(role) for role in allowed_roles}
        if session.role is None or session.role not in allowed:
            return AccessDecision(AccessOutcome.redirect_home, HOME)
    return AccessDecision(AccessOutcome.allow)


def get_identity_gateway(db: Database = Depends(get_database)) -> IdentityGateway:
    return IdentityGateway(db)


def get_role_resolver(db: Database = Depends(get_database)) -> RoleResolver:
    return RoleResolver(UserService(db))


async def get_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    gateway: IdentityGateway = Depends(get_identity_gateway),
    resolver: RoleResolver = Depends(get_role_resolver),
) -> Session:
    """
    FastAPI dependency - the caller's Session, anonymous if no valid token.

    Usage:
        @router.get("/jobs")
        async def route(session: Session = Depends(get_session)):
            if session.is_student: ...
    """
    if credentials is None:
        return ANONYMOUS
    identity = gateway.resolve_token(credentials.credentials)
    return resolver.session_for(identity, token=credentials.credentials)


def require_roles(*roles: UserRole):
    """
    Dependency factory - guard a route, optionally to a set of roles.

    Usage:
        @router.post("/jobs")
        async def route(session: Session = Depends(require_roles(UserRole.employer))):
            ...
    """
    allowed_roles = roles or None

    async def guard(session: Session = Depends(get_session)) -> Session:
        decision = evaluate_access(session, allowed_roles)
        if decision.outcome == AccessOutcome.redirect_auth:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
                headers={"WWW-Authenticate": "Bearer", "Location": decision.location},
            )
        if decision.outcome == AccessOutcome.redirect_home:
            names = ", ".join(sorted(UserRole(role).value for role in allowed_roles))
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Only {names} accounts can access this",
                headers={"Location": decision.location},
            )
        return session

    return guard


get_current_session = require_roles()
get_current_student = require_roles(UserRole.student)
get_current_employer = require_roles(UserRole.employer)
get_current_admin = require_roles(UserRole.admin)
