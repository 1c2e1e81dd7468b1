# server/api/auth.py

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from api.deps import get_current_user, get_session_issuer
from api.schemas import CredentialsRequest, LoginRequest, ProfileResponse, ProfileUpdateRequest, PublicUser, Token
from core.session import SessionIssuer, TokenIdentity


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Token)
def register(body: CredentialsRequest, issuer: SessionIssuer = Depends(get_session_issuer)):
    return issuer.register(body.username, body.password)


@router.post("/login", response_model=Token)
def login(body: LoginRequest, issuer: SessionIssuer = Depends(get_session_issuer)):
    return issuer.login(body.username, body.password)


@router.post("/token", response_model=Token)
def login_form(form_data: OAuth2PasswordRequestForm = Depends(), issuer: SessionIssuer = Depends(get_session_issuer)):
    """
    Same as /auth/login but takes the OAuth2 password form,
    which is what the interactive docs' "Authorize" button sends.
    """
    return issuer.login(form_data.username, form_data.password)


@router.get("/me", response_model=PublicUser)
def read_users_me(current_user: TokenIdentity = Depends(get_current_user)):
    return {"id": current_user.user_id, "username": current_user.username}


@router.patch("/me", response_model=ProfileResponse)
def update_me(
    body: ProfileUpdateRequest,
    current_user: TokenIdentity = Depends(get_current_user),
    issuer: SessionIssuer = Depends(get_session_issuer),
):
    return issuer.update_profile(current_user.user_id, body.username)
