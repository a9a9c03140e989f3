"""
Authentication routes.

Routes:
    POST /signup        - Create a password account and start a session
    POST /signin        - Sign in with email and password
    POST /auth/google   - Sign in (or sign up) with a Google identity token
    GET  /auth/verify   - Report whether the session cookie is valid
    POST /signout       - End the current session

Each route is also served under /api/auth/... for existing clients.
"""

from typing import Optional

from fastapi import APIRouter, Request, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from estateiq.config import settings, SESSION_COOKIE_NAME, SESSION_COOKIE_MAX_AGE
from estateiq.db import get_db
from estateiq.errors import Unauthorized
from estateiq.logging_config import get_logger
from estateiq.models.user import User
from estateiq.services.auth import AuthService

# Module logger for authentication operations
logger = get_logger(__name__)

router = APIRouter()


class SignUpRequest(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None


class SignInRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class GoogleAuthRequest(BaseModel):
    credential: Optional[str] = None


def set_session_cookie(response: JSONResponse, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=SESSION_COOKIE_MAX_AGE,
        path="/",
    )


def client_metadata(request: Request) -> dict:
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


def signed_in_response(user: User, token: str, message: str, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    response = JSONResponse(
        {"success": True, "message": message, "user": user.to_public_dict()},
        status_code=status_code,
    )
    set_session_cookie(response, token)
    return response


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Dependency for protected routes: the user behind the session cookie, or 401."""
    user = AuthService(db).verify_session(request.cookies.get(SESSION_COOKIE_NAME))
    if user is None:
        raise Unauthorized()
    return user


@router.post("/signup")
@router.post("/api/auth/signup")
def signup(request: Request, data: SignUpRequest, db: Session = Depends(get_db)):
    logger.info(f"Signup attempt for email: {data.email}")
    service = AuthService(db)
    user = service.create_user(
        first_name=data.firstName,
        last_name=data.lastName,
        email=data.email,
        password=data.password,
        phone=data.phone,
        company=data.company,
    )
    token = service.create_session(user.id, **client_metadata(request))
    return signed_in_response(user, token, "Account created successfully", status.HTTP_201_CREATED)


@router.post("/signin")
@router.post("/api/auth/signin")
def signin(request: Request, data: SignInRequest, db: Session = Depends(get_db)):
    logger.info(f"Signin attempt for email: {data.email}")
    user, token = AuthService(db).sign_in(data.email, data.password, **client_metadata(request))
    return signed_in_response(user, token, "Signed in successfully")


@router.post("/auth/google")
@router.post("/api/auth/google")
def google_auth(request: Request, data: GoogleAuthRequest, db: Session = Depends(get_db)):
    user, token = AuthService(db).authenticate_google(data.credential, **client_metadata(request))
    return signed_in_response(user, token, "Signed in with Google successfully")


@router.get("/auth/verify")
@router.get("/api/auth/verify")
def verify(request: Request, db: Session = Depends(get_db)):
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        logger.debug("No session token found in cookies")
        return JSONResponse({"valid": False, "user": None})

    try:
        user = AuthService(db).verify_session(token)
    except Exception:
        logger.exception("Auth verification error")
        return JSONResponse({"valid": False, "user": None}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if user is None:
        response = JSONResponse({"valid": False, "user": None})
        response.delete_cookie(SESSION_COOKIE_NAME, path="/")
        return response

    return JSONResponse({"valid": True, "user": user.to_public_dict()})


@router.post("/signout")
@router.post("/api/auth/signout")
def signout(request: Request, db: Session = Depends(get_db)):
    token = request.cookies.get(SESSION_COOKIE_NAME)
    try:
        AuthService(db).sign_out(token)
    except Exception:
        # The cookie is cleared regardless
        logger.exception("Signout error")
        db.rollback()

    response = JSONResponse({"success": True, "message": "Signed out successfully"})
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return response
