"""
Registration and login endpoints.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ..auth import AuthService
from ..db import get_db
from ..errors import InvalidCredentialsError
from ..schemas import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse, UserPublic
from ..utils.event_logger import log_auth_event

router = APIRouter(tags=["auth"])


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    request: Request,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
):
    user = auth_service.register(db, payload.name, payload.email, payload.password)
    log_auth_event("register", request, user_id=user.id, email=user.email)
    return RegisterResponse(message="User registered successfully", user=UserPublic.model_validate(user))


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    request: Request,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
):
    try:
        token, user = auth_service.login(db, credentials.email, credentials.password)
    except InvalidCredentialsError:
        log_auth_event("login_failure", request, email=credentials.email)
        raise

    log_auth_event("login_success", request, user_id=user.id, email=user.email)
    return LoginResponse(message="Login successful", token=token, user=UserPublic.model_validate(user))
