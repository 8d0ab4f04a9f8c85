"""
Identity Gateway - accounts, credentials and bearer tokens.

Accounts live in their own collection, separate from the ``users`` profile
documents; the account id is the identity uid every other collection refers
to. Tokens are JWTs; signing out records the token's ``jti`` as revoked
until it would have expired.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from careerbridge.core.errors import AccountExistsError, AuthenticationError
from careerbridge.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from careerbridge.db.mongodb import COLLECTIONS, get_collection
from careerbridge.services.mongo_service import to_object_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """An authenticated account, as seen by the rest of the app."""
    uid: str
    email: str
    display_name: str = ""


def _identity_from_account(account: dict) -> Identity:
    return Identity(
        uid=str(account["_id"]),
        email=account["email"],
        display_name=account.get("displayName") or "",
    )


class IdentityGateway:

    def __init__(self, db: Database = None):
        self.accounts = get_collection(COLLECTIONS["accounts"], db)
        self.revoked = get_collection(COLLECTIONS["revoked_tokens"], db)

    def create_account(self, email: str, password: str) -> Identity:
        """Create an account; the email must not be registered yet."""
        email = email.lower()
        if self.accounts.find_one({"email": email}):
            raise AccountExistsError()

        doc = {
            "email": email,
            "passwordHash": hash_password(password),
            "displayName": "",
            "createdAt": datetime.utcnow(),
        }
        try:
            result = self.accounts.insert_one(doc)
        except DuplicateKeyError:
            raise AccountExistsError()

        logger.info("Account created for %s", email)
        doc["_id"] = result.inserted_id
        return _identity_from_account(doc)

    def authenticate(self, email: str, password: str) -> Identity:
        """Verify credentials. Raises AuthenticationError on any mismatch."""
        account = self.accounts.find_one({"email": email.lower()})
        if not account or not verify_password(password, account["passwordHash"]):
            raise AuthenticationError()
        return _identity_from_account(account)

    def issue_token(self, identity: Identity) -> str:
        return create_access_token(data={"sub": identity.uid})

    def resolve_token(self, token: str) -> Optional[Identity]:
        """
        Current identity for a bearer token.

        Returns None for invalid, expired or revoked tokens, and for tokens
        whose account no longer exists.
        """
        payload = decode_token(token)
        if not payload or not payload.get("sub"):
            return None
        if payload.get("jti") and self.revoked.find_one({"_id": payload["jti"]}):
            return None

        key = to_object_id(payload["sub"])
        account = self.accounts.find_one({"_id": key}) if key else None
        if not account:
            return None
        return _identity_from_account(account)

    def sign_out(self, token: str) -> None:
        payload = decode_token(token)
        if not payload or not payload.get("jti"):
            return
        expires_at = datetime.utcfromtimestamp(payload["exp"]) if payload.get("exp") else datetime.utcnow()
        self.revoked.update_one(
            {"_id": payload["jti"]},
            {"$set": {"expiresAt": expires_at}},
            upsert=True,
        )
        logger.info("Signed out %s", payload.get("sub"))

    def update_profile(self, uid: str, display_name: str) -> Optional[Identity]:
        key = to_object_id(uid)
        if key is None:
            return None
        self.accounts.update_one({"_id": key}, {"$set": {"displayName": display_name}})
        account = self.accounts.find_one({"_id": key})
        return _identity_from_account(account) if account else None

    def delete_account(self, uid: str) -> bool:
        """Remove an account. Used to undo a signup whose profile write failed."""
        key = to_object_id(uid)
        if key is None:
            return False
        result = self.accounts.delete_one({"_id": key})
        return result.deleted_count > 0
