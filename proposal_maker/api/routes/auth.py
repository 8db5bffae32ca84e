"""Account signup, login and session introspection."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from proposal_maker.config.settings import get_settings
from proposal_maker.core.database import get_db
from proposal_maker.core.security import create_session_token, hash_password, verify_password
from proposal_maker.core.user_context import get_current_account
from proposal_maker.database.models import Account
from proposal_maker.utils.error_handling import AppException, AuthenticationError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if "@" not in value or value.startswith("@") or value.endswith("@"):
        raise ValueError("Please provide a valid email")
    return value


class SignupRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Name cannot be empty")
        return value.strip()


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class AccountResponse(BaseModel):
    id: int
    email: str
    name: str


class MeResponse(AccountResponse):
    has_api_key: bool


class SignupResponse(BaseModel):
    message: str
    user: AccountResponse


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
def signup(request: SignupRequest, db: Session = Depends(get_db)):
    """
    Register a new account.

    Raises:
        400: Email already registered
    """
    try:
        existing = db.query(Account).filter(Account.email == request.email).first()
        if existing:
            raise ValidationError("User already exists")

        account = Account(
            email=request.email,
            name=request.name,
            password_hash=hash_password(request.password),
        )
        db.add(account)
        try:
            db.commit()
        except IntegrityError:
            # Concurrent signup with the same email
            db.rollback()
            raise ValidationError("User already exists")
        db.refresh(account)

        logger.info(f"Created account (id={account.id})")
        return SignupResponse(
            message="User created successfully",
            user=AccountResponse(id=account.id, email=account.email, name=account.name),
        )
    except (HTTPException, AppException):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Signup error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Something went wrong",
        )


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """
    Exchange email and password for a session token.

    Raises:
        401: Unknown email or wrong password
    """
    account = db.query(Account).filter(Account.email == request.email).first()
    if account is None or not verify_password(request.password, account.password_hash):
        logger.info("Failed login attempt")
        raise AuthenticationError("Invalid email or password")

    logger.info(f"Account logged in (id={account.id})")
    return TokenResponse(
        access_token=create_session_token(account.id),
        expires_in=get_settings().session_ttl_seconds,
    )


@router.get("/me", response_model=MeResponse)
def me(account: Account = Depends(get_current_account)):
    return MeResponse(
        id=account.id,
        email=account.email,
        name=account.name,
        has_api_key=account.has_api_key,
    )
