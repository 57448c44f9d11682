"""
Authentication API controller.
"""

import logging

from allauth.account.internal.flows.email_verification import send_verification_email_for_user
from allauth.account.models import EmailAddress
from allauth.account.models import EmailConfirmationHMAC
from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth import login
from django.contrib.auth import logout
from django.contrib.auth.password_validation import validate_password
from django.contrib.auth.tokens import default_token_generator
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.mail import send_mail
from django.http import HttpRequest
from django.middleware.csrf import get_token
from django.utils.encoding import force_bytes
from django.utils.encoding import force_str
from django.utils.http import urlsafe_base64_decode
from django.utils.http import urlsafe_base64_encode
from ninja_extra import api_controller
from ninja_extra import http_get
from ninja_extra import http_post

from projectsync.core.api import AllowAny
from projectsync.core.api import BaseAPI
from projectsync.core.exceptions import AccountDisabledError
from projectsync.core.exceptions import AlreadyExistsError
from projectsync.core.exceptions import BadRequestError
from projectsync.core.exceptions import ErrorSchema
from projectsync.core.exceptions import InvalidCredentialsError
from projectsync.core.exceptions import NotAuthenticatedError
from projectsync.core.exceptions import ValidationError
from projectsync.core.roles import Role
from projectsync.users.models import User
from projectsync.users.schemas import CSRFTokenSchema
from projectsync.users.schemas import EmailVerifySchema
from projectsync.users.schemas import LoginResponseSchema
from projectsync.users.schemas import LoginSchema
from projectsync.users.schemas import MessageSchema
from projectsync.users.schemas import PasswordChangeSchema
from projectsync.users.schemas import PasswordResetConfirmSchema
from projectsync.users.schemas import PasswordResetRequestSchema
from projectsync.users.schemas import SignupResponseSchema
from projectsync.users.schemas import SignupSchema
from projectsync.users.schemas import UserSchema
from projectsync.users.services import email_domain_error

logger = logging.getLogger(__name__)


def is_disabled_account(email: str, password: str) -> bool:
    """
    True when the credentials are right but the account is deactivated.

    ModelBackend refuses inactive users outright, so a failed authenticate()
    does not tell a wrong password apart from a disabled account.
    """
    user = User.objects.filter(email__iexact=email, is_active=False).first()
    return user is not None and user.check_password(password)


@api_controller("/auth", tags=["Authentication"], permissions=[AllowAny])
class AuthController(BaseAPI):
    """Session login, registration and password management."""

    @http_get("/csrf", response=CSRFTokenSchema, url_name="auth_csrf")
    def get_csrf_token(self, request: HttpRequest):
        """Get a CSRF token for subsequent POST requests."""
        return CSRFTokenSchema(csrf_token=get_token(request))

    @http_post(
        "/login",
        response={200: LoginResponseSchema, 401: ErrorSchema, 400: ErrorSchema},
        url_name="auth_login",
    )
    def login_view(self, request: HttpRequest, data: LoginSchema):
        """Authenticate with email and password and bind the session."""
        if not data.email or not data.password:
            return BadRequestError("Email and password are required.").to_response()

        user = authenticate(request, username=data.email, password=data.password)

        if user is None:
            if is_disabled_account(data.email, data.password):
                logger.info("LOGIN: refused deactivated account %s", data.email)
                return AccountDisabledError().to_response()
            return InvalidCredentialsError().to_response()

        if not user.is_active:
            return AccountDisabledError().to_response()

        login(request, user, backend="django.contrib.auth.backends.ModelBackend")

        return 200, LoginResponseSchema(
            success=True,
            user=UserSchema.from_user(user),
            csrf_token=get_token(request),
        )

    @http_post("/logout", response={200: MessageSchema}, url_name="auth_logout")
    def logout_view(self, request: HttpRequest):
        logout(request)
        return 200, MessageSchema(success=True, message="Logged out.")

    @http_get(
        "/me",
        response={200: UserSchema, 401: ErrorSchema},
        url_name="auth_me",
    )
    def me_view(self, request: HttpRequest):
        """Get the current user's role-tagged profile."""
        if not request.user.is_authenticated:
            return NotAuthenticatedError().to_response()

        return 200, UserSchema.from_user(request.user)

    @http_post(
        "/signup",
        response={201: SignupResponseSchema, 400: ErrorSchema, 409: ErrorSchema},
        url_name="auth_signup",
    )
    def signup_view(self, request: HttpRequest, data: SignupSchema):
        """
        Register a new account.

        Self-registration always creates an active student; staff accounts
        are created through /users.
        """
        if User.objects.filter(email__iexact=data.email).exists():
            return AlreadyExistsError("An account with this email already exists.").to_response()

        if error := email_domain_error(data.email, Role.STUDENT):
            return ValidationError(error).to_response()

        try:
            validate_password(data.password)
        except DjangoValidationError as e:
            return ValidationError(
                message=" ".join(e.messages),
                details={"password_errors": e.messages},
            ).to_response()

        user = User.objects.create_user(
            email=data.email,
            password=data.password,
            first_name=data.first_name,
            last_name=data.last_name,
            department=data.department,
            enrollment_number=data.enrollment_number,
            semester=data.semester,
        )
        user.set_role(Role.STUDENT)

        EmailAddress.objects.create(
            user=user,
            email=user.email,
            primary=True,
            verified=False,
        )

        try:
            send_verification_email_for_user(request, user)
        except Exception:
            logger.exception("Failed to send verification email")

        return 201, SignupResponseSchema(
            success=True,
            message="Account created. You can now sign in.",
            user=UserSchema.from_user(user),
        )

    @http_post(
        "/verify-email",
        response={200: MessageSchema, 400: ErrorSchema},
        url_name="auth_verify_email",
    )
    def verify_email_view(self, request: HttpRequest, data: EmailVerifySchema):
        """Confirm an email address with the key from the verification email."""
        email_confirmation = EmailConfirmationHMAC.from_key(data.key)
        if email_confirmation is None:
            return BadRequestError("Invalid or expired verification link.").to_response()

        email_confirmation.confirm(request)
        return 200, MessageSchema(success=True, message="Email verified.")

    @http_post(
        "/password-reset",
        response={200: MessageSchema},
        url_name="auth_password_reset",
    )
    def password_reset_request_view(self, request: HttpRequest, data: PasswordResetRequestSchema):
        """Request a password reset email."""
        user = User.objects.filter(email__iexact=data.email, is_active=True).first()
        if user is not None:
            uid = urlsafe_base64_encode(force_bytes(user.pk))
            token = default_token_generator.make_token(user)
            reset_url = f"{settings.FRONTEND_URL}/reset-password?uid={uid}&token={token}"

            message = (
                f"Hello {user.first_name},\n\n"
                "A password reset was requested for your ProjectSync account.\n"
                f"Set a new password here:\n{reset_url}\n\n"
                "If you did not request this, ignore this email.\n"
            )
            try:
                send_mail(
                    subject="Reset your ProjectSync password",
                    message=message,
                    from_email=None,
                    recipient_list=[user.email],
                    fail_silently=False,
                )
            except Exception:
                logger.exception("Failed to send password reset email")

        return 200, MessageSchema(
            success=True,
            message="If an account exists for this email, a reset link has been sent.",
        )

    @http_post(
        "/password-reset/confirm",
        response={200: MessageSchema, 400: ErrorSchema},
        url_name="auth_password_reset_confirm",
    )
    def password_reset_confirm_view(self, request: HttpRequest, data: PasswordResetConfirmSchema):
        """Confirm password reset with token and set new password."""
        try:
            uid = force_str(urlsafe_base64_decode(data.uid))
            user = User.objects.get(pk=uid)
        except (TypeError, ValueError, OverflowError, DjangoValidationError, User.DoesNotExist):
            return BadRequestError("Invalid reset link.").to_response()

        if not default_token_generator.check_token(user, data.token):
            return BadRequestError("Reset link expired or invalid.").to_response()

        try:
            validate_password(data.new_password, user=user)
        except DjangoValidationError as e:
            return ValidationError(
                message=" ".join(e.messages),
                details={"password_errors": e.messages},
            ).to_response()

        user.set_password(data.new_password)
        user.save()

        return 200, MessageSchema(success=True, message="Password updated. You can now sign in.")

    @http_post(
        "/password-change",
        response={200: MessageSchema, 400: ErrorSchema, 401: ErrorSchema},
        url_name="auth_password_change",
    )
    def password_change_view(self, request: HttpRequest, data: PasswordChangeSchema):
        """Change password for authenticated user."""
        if not request.user.is_authenticated:
            return NotAuthenticatedError().to_response()

        user = request.user

        if not user.check_password(data.current_password):
            return BadRequestError("Current password is incorrect.").to_response()

        try:
            validate_password(data.new_password, user=user)
        except DjangoValidationError as e:
            return ValidationError(
                message=" ".join(e.messages),
                details={"password_errors": e.messages},
            ).to_response()

        user.set_password(data.new_password)
        user.save()

        login(request, user, backend="django.contrib.auth.backends.ModelBackend")

        return 200, MessageSchema(success=True, message="Password updated.")
