"""
Role Resolver - maps an identity to its role and capability flags.
"""

from dataclasses import dataclass
from typing import Optional

from careerbridge.models import UserRole
from careerbridge.services.identity_service import Identity
from careerbridge.services.mongo_service import UserService


@dataclass(frozen=True)
class Session:
    """
    Who is calling, resolved once per request.

    Exactly one flag is true when a role is known; all are false for
    anonymous callers and for identities without a (valid) user document.
    """
    identity: Optional[Identity] = None
    role: Optional[UserRole] = None
    token: Optional[str] = None

    @property
    def uid(self) -> Optional[str]:
        return self.identity.uid if self.identity else None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def is_employer(self) -> bool:
        return self.role == UserRole.employer

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.student


ANONYMOUS = Session()


class RoleResolver:

    def __init__(self, users: UserService):
        self.users = users

    def resolve(self, identity: Optional[Identity]) -> Optional[UserRole]:
        """Role from the user's document; None when absent. Never raises for a missing document."""
        if identity is None:
            return None
        user = self.users.get_by_id(identity.uid)
        return user.role if user else None

    def session_for(self, identity: Optional[Identity], token: str = None) -> Session:
        if identity is None:
            return ANONYMOUS
        return Session(identity=identity, role=self.resolve(identity), token=token)
