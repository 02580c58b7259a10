"""Authentication router package: login, registration, refresh and email confirmation."""

from fastapi import APIRouter

from .routes import confirm_email as confirm_email_route
from .routes import login as login_route
from .routes import refresh as refresh_route
from .routes import register as register_route
from .routes import resend_confirmation as resend_confirmation_route

router = APIRouter(prefix="/auth", tags=["auth"])

router.include_router(login_route.router, prefix="/login")
router.include_router(register_route.router, prefix="/register")
router.include_router(refresh_route.router, prefix="/refresh")
router.include_router(confirm_email_route.router, prefix="/confirm-email")
router.include_router(resend_confirmation_route.router, prefix="/resend-confirmation")

__all__ = ["router"]
