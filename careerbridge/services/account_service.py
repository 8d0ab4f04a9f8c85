"""
Account provisioning - an identity plus its user profile document.

Signup, admin-created employers and scripts/create_admin.py all go through
provision_user, so a failed profile write never leaves an account behind
without a role.
"""

import logging
from typing import Tuple

from pymongo.errors import PyMongoError

from careerbridge.models import UserDocument, UserRole
from careerbridge.services.identity_service import Identity, IdentityGateway
from careerbridge.services.mongo_service import UserService

logger = logging.getLogger(__name__)


def provision_user(
    gateway: IdentityGateway,
    users: UserService,
    email: str,
    password: str,
    name: str,
    phone: str,
    role: UserRole,
    company: str = None,
    contact_person: str = None,
    created_by: str = None,
) -> Tuple[Identity, UserDocument]:
    """
    Create the account, set its display name and write the profile.

    If anything after the account insert fails, the account is deleted
    again before the error propagates, so the email stays free for a retry.
    """
    identity = gateway.create_account(email, password)
    try:
        gateway.update_profile(identity.uid, name)
        user = users.create(
            uid=identity.uid,
            email=identity.email,
            name=name,
            phone=phone,
            role=role,
            company=company,
            contact_person=contact_person,
            created_by=created_by,
        )
    except PyMongoError:
        logger.warning("Profile write failed for %s; removing account %s", identity.email, identity.uid)
        gateway.delete_account(identity.uid)
        raise
    return Identity(identity.uid, identity.email, name), user
