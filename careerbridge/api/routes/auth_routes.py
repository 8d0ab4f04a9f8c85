"""
Authentication Routes

POST /auth/register - Create account + profile, returns a token
POST /auth/login - Login and get JWT token
POST /auth/logout - Revoke the current token
GET /auth/me - Current session (identity + role flags)
PUT /auth/profile - Update display name
"""

from fastapi import APIRouter, Depends

from careerbridge.api.deps import get_user_service
from careerbridge.core.auth import (
    get_current_session,
    get_identity_gateway,
    get_role_resolver,
)
from careerbridge.core.errors import store_guard
from careerbridge.models import UserRole
from careerbridge.schemas.schemas import (
    LoginRequest,
    MessageResponse,
    ProfileUpdate,
    RegisterRequest,
    SessionResponse,
    TokenResponse,
)
from careerbridge.services.account_service import provision_user
from careerbridge.services.identity_service import IdentityGateway
from careerbridge.services.mongo_service import UserService
from careerbridge.services.role_service import RoleResolver, Session

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    request: RegisterRequest,
    gateway: IdentityGateway = Depends(get_identity_gateway),
    users: UserService = Depends(get_user_service),
):
    """
    Register a student or employer account.

    Employers must give a company name. Admin accounts are provisioned with
    scripts/create_admin.py. The new account is signed in right away.
    """
    role = UserRole(request.role.value)
    with store_guard("Failed to create account"):
        identity, _ = provision_user(
            gateway,
            users,
            email=request.email,
            password=request.password,
            name=request.name,
            phone=request.phone,
            role=role,
            company=request.company,
        )
        token = gateway.issue_token(identity)

    return TokenResponse(access_token=token, user_id=identity.uid, role=role.value)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    gateway: IdentityGateway = Depends(get_identity_gateway),
    resolver: RoleResolver = Depends(get_role_resolver),
):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with store_guard("Failed to authenticate"):
        identity = gateway.authenticate(request.email, request.password)
        role = resolver.resolve(identity)
        token = gateway.issue_token(identity)

    return TokenResponse(access_token=token, user_id=identity.uid, role=role.value if role else None)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    session: Session = Depends(get_current_session),
    gateway: IdentityGateway = Depends(get_identity_gateway),
):
    with store_guard("Failed to sign out"):
        gateway.sign_out(session.token)
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=SessionResponse)
async def get_me(session: Session = Depends(get_current_session)):
    """Get current authenticated user's info and capability flags."""
    return SessionResponse(
        user_id=session.uid,
        email=session.identity.email,
        display_name=session.identity.display_name,
        role=session.role.value if session.role else None,
        is_admin=session.is_admin,
        is_employer=session.is_employer,
        is_student=session.is_student,
    )


@router.put("/profile", response_model=MessageResponse)
async def update_profile(
    data: ProfileUpdate,
    session: Session = Depends(get_current_session),
    gateway: IdentityGateway = Depends(get_identity_gateway),
    users: UserService = Depends(get_user_service),
):
    """Update the display name on the account and the user profile."""
    with store_guard("Failed to update profile"):
        gateway.update_profile(session.uid, data.display_name)
        users.update_name(session.uid, data.display_name)
    return MessageResponse(message="Profile updated successfully")
