"""
identity.py
-----------
Identity operations behind the /api/auth/ endpoints:

- sign_up / authenticate_email: email + password accounts
- sign_in_with_google: federated accounts, treated as pre-verified
- send_verification_email / confirm_email: email ownership
- send_password_reset / reset_password: password recovery
- describe: the "current identity" payload used by the front end

Verification and reset links are signed tokens (Django's token generator
machinery) pointing at FRONTEND_URL.
"""

import logging

import httpx
from django.conf import settings
from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.password_validation import validate_password
from django.contrib.auth.tokens import PasswordResetTokenGenerator, default_token_generator
from django.core.exceptions import ValidationError
from django.core.mail import send_mail
from django.core.validators import validate_email
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode

from configmgr.access_control import AccessControl
from .models import AccountProfile

logger = logging.getLogger(__name__)

User = get_user_model()


class IdentityError(ValueError):
    """Raised when an identity operation cannot be completed."""


class EmailVerificationTokenGenerator(PasswordResetTokenGenerator):
    # Token stops working once the address is verified.
    key_salt = "accounts.identity.EmailVerificationTokenGenerator"

    def _make_hash_value(self, user, timestamp):
        profile = get_profile(user)
        return f"{user.pk}{user.email}{profile.email_verified}{timestamp}"


email_verification_token = EmailVerificationTokenGenerator()


def get_profile(user):
    profile, _ = AccountProfile.objects.get_or_create(
        user=user,
        defaults={"display_name": user.get_full_name() or ""},
    )
    return profile


def is_verified(user) -> bool:
    """Verified email OR a federated (pre-verified) provider."""
    if user is None or not user.is_authenticated:
        return False
    return get_profile(user).is_verified


def describe(user, access=None):
    """
    The current identity: {id, email, email_verified, provider, is_admin}.
    Anonymous users get None.
    """
    if user is None or not user.is_authenticated:
        return None
    profile = get_profile(user)
    access = access or AccessControl()
    return {
        "id": user.pk,
        "email": user.email,
        "name": profile.display_name,
        "email_verified": profile.email_verified,
        "provider": profile.provider,
        "is_admin": profile.is_verified and access.is_admin(user.email),
    }


def find_user_by_email(email):
    return User.objects.filter(email__iexact=(email or "").strip()).first()


def _normalise_email(email):
    email = (email or "").strip().lower()
    try:
        validate_email(email)
    except ValidationError as e:
        raise IdentityError("Please enter a valid email address.") from e
    return email


def sign_up(email, password, name=""):
    """
    Create an email/password account and send the verification email.
    """
    email = _normalise_email(email)
    if not password:
        raise IdentityError("Password is required.")
    if find_user_by_email(email):
        raise IdentityError("Email already used.")

    try:
        validate_password(password)
    except ValidationError as e:
        raise IdentityError(" ".join(e.messages)) from e

    user = User.objects.create_user(username=email, email=email, password=password)
    AccountProfile.objects.create(
        user=user,
        display_name=(name or "").strip(),
        provider=AccountProfile.PROVIDER_PASSWORD,
    )
    logger.info("Account created for %s", email)
    send_verification_email(user)
    return user


def authenticate_email(request, email, password):
    """Return the user for valid credentials, else None."""
    user = find_user_by_email(email)
    if user is None:
        return None
    return authenticate(request, username=user.get_username(), password=password)


def _link(path, user, token):
    uid = urlsafe_base64_encode(force_bytes(user.pk))
    return f"{settings.FRONTEND_URL.rstrip('/')}/{path}?uid={uid}&token={token}"


def send_verification_email(user):
    if get_profile(user).is_verified:
        return False
    link = _link("verify-email", user, email_verification_token.make_token(user))
    send_mail(
        subject="Verify your email address",
        message=(
            "Hi,\n\n"
            "Please confirm your email address to finish setting up your account:\n"
            f"{link}\n\n"
            "If you did not sign up, you can ignore this email."
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[user.email],
        fail_silently=False,
    )
    logger.info("Verification email sent to %s", user.email)
    return True


def _user_from_uid(uidb64):
    try:
        pk = force_str(urlsafe_base64_decode(uidb64))
        return User.objects.get(pk=pk)
    except (TypeError, ValueError, OverflowError, User.DoesNotExist):
        return None


def confirm_email(uidb64, token):
    user = _user_from_uid(uidb64)
    if user is None or not email_verification_token.check_token(user, token):
        raise IdentityError("This verification link is invalid or has expired.")
    profile = get_profile(user)
    profile.email_verified = True
    profile.save(update_fields=["email_verified"])
    logger.info("Email verified for %s", user.email)
    return user


def send_password_reset(email):
    """
    Email a reset link when the address belongs to a password account.
    Unknown addresses are ignored so callers cannot probe for accounts.
    """
    user = find_user_by_email(email)
    if user is None or not user.has_usable_password():
        logger.info("Password reset requested for unknown address")
        return False
    link = _link("reset-password", user, default_token_generator.make_token(user))
    send_mail(
        subject="Reset your password",
        message=(
            "Hi,\n\n"
            "Use the link below to choose a new password:\n"
            f"{link}\n\n"
            "If you did not request this, you can ignore this email."
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[user.email],
        fail_silently=False,
    )
    return True


def reset_password(uidb64, token, new_password):
    user = _user_from_uid(uidb64)
    if user is None or not default_token_generator.check_token(user, token):
        raise IdentityError("This reset link is invalid or has expired.")
    try:
        validate_password(new_password, user=user)
    except ValidationError as e:
        raise IdentityError(" ".join(e.messages)) from e
    user.set_password(new_password)
    user.save(update_fields=["password"])
    logger.info("Password reset for %s", user.email)
    return user


def verify_google_token(id_token):
    """
    Validate a Google ID token with Google's token-info endpoint and return
    its claims. The audience must match GOOGLE_CLIENT_ID when one is set.
    """
    if not id_token:
        raise IdentityError("Missing Google ID token.")
    try:
        response = httpx.get(settings.GOOGLE_TOKENINFO_URL, params={"id_token": id_token}, timeout=10.0)
    except httpx.HTTPError as e:
        logger.error("Google token verification failed: %s", e)
        raise IdentityError("Could not reach Google to verify the sign-in. Please try again.") from e

    if response.status_code != 200:
        raise IdentityError("Invalid Google ID token.")

    claims = response.json()
    client_id = settings.GOOGLE_CLIENT_ID
    if client_id and claims.get("aud") != client_id:
        raise IdentityError("Google ID token was issued for a different application.")
    if str(claims.get("email_verified", "")).lower() != "true" or not claims.get("email"):
        raise IdentityError("Google account has no verified email address.")
    return claims


def sign_in_with_google(id_token):
    """
    Find or create the account for a verified Google identity.
    """
    claims = verify_google_token(id_token)
    email = claims["email"].strip().lower()
    user = find_user_by_email(email)
    if user is None:
        user = User(username=email, email=email)
        user.set_unusable_password()
        user.save()
        AccountProfile.objects.create(
            user=user,
            display_name=claims.get("name", ""),
            email_verified=True,
            provider=AccountProfile.PROVIDER_GOOGLE,
        )
        logger.info("Account created from Google sign-in for %s", email)
        return user

    profile = get_profile(user)
    if not profile.email_verified:
        # An unverified password never survives linking to a Google identity.
        if user.has_usable_password():
            user.set_unusable_password()
            user.save(update_fields=["password"])
            logger.info("Unverified password dropped for %s on Google sign-in", email)
        profile.email_verified = True
        profile.provider = AccountProfile.PROVIDER_GOOGLE
        profile.save(update_fields=["email_verified", "provider"])
    return user
