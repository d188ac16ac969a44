# accounts/views.py
#
# Purpose:
# - Session-based identity endpoints under /api/auth/.
# - Sign-up and sign-in are csrf-exempt JSON endpoints; everything else uses
#   the DRF session authentication defaults.
#
import logging
from smtplib import SMTPException

from django.contrib.auth import login, logout
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import identity
from .identity import IdentityError

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class SignupView(APIView):
    """
    POST /api/auth/signup
    {"email": "jane@example.com", "password": "...", "name": "Jane Doe"}
    Creates the account, emails a verification link and logs the user in.
    """
    authentication_classes = []

    def post(self, request):
        data = request.data
        try:
            user = identity.sign_up(data.get("email"), data.get("password"), data.get("name", ""))
        except IdentityError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except SMTPException:
            # Account exists; the user can ask for the email again.
            logger.exception("Verification email failed during sign-up")
            user = identity.find_user_by_email(data.get("email"))

        login(request, user, backend="django.contrib.auth.backends.ModelBackend")
        return Response(identity.describe(user), status=status.HTTP_201_CREATED)


@method_decorator(csrf_exempt, name="dispatch")
class LoginView(APIView):
    """
    POST /api/auth/login {"email", "password"}
    """
    authentication_classes = []

    def post(self, request):
        user = identity.authenticate_email(request, request.data.get("email"), request.data.get("password"))
        if not user:
            return Response({"detail": "Invalid credentials."}, status=status.HTTP_400_BAD_REQUEST)

        login(request, user)
        return Response(identity.describe(user), status=status.HTTP_200_OK)


@method_decorator(csrf_exempt, name="dispatch")
class GoogleSignInView(APIView):
    """
    POST /api/auth/google {"id_token": "..."}
    Google accounts are treated as verified.
    """
    authentication_classes = []

    def post(self, request):
        try:
            user = identity.sign_in_with_google(request.data.get("id_token"))
        except IdentityError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        login(request, user, backend="django.contrib.auth.backends.ModelBackend")
        return Response(identity.describe(user), status=status.HTTP_200_OK)


class LogoutView(APIView):
    """
    POST /api/auth/logout
    """
    def post(self, request):
        logout(request)
        return Response({"detail": "Logged out."}, status=status.HTTP_200_OK)


class CurrentIdentityView(APIView):
    """
    GET /api/auth/me -> {"identity": {...}} or {"identity": null}
    Re-evaluated on every call, so admin status follows the allow-list.
    """
    def get(self, request):
        return Response({"identity": identity.describe(request.user)})


class ResendVerificationView(APIView):
    """
    POST /api/auth/verify-email/resend
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        try:
            sent = identity.send_verification_email(request.user)
        except SMTPException:
            logger.exception("Verification email failed for %s", request.user.email)
            return Response(
                {"detail": "Could not send the verification email. Please try again."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        if not sent:
            return Response({"detail": "Email already verified."}, status=status.HTTP_200_OK)
        return Response({"detail": "Verification email sent."}, status=status.HTTP_200_OK)


@method_decorator(csrf_exempt, name="dispatch")
class VerifyEmailView(APIView):
    """
    POST /api/auth/verify-email {"uid", "token"}
    """
    authentication_classes = []

    def post(self, request):
        try:
            user = identity.confirm_email(request.data.get("uid", ""), request.data.get("token", ""))
        except IdentityError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(identity.describe(user), status=status.HTTP_200_OK)


@method_decorator(csrf_exempt, name="dispatch")
class PasswordResetRequestView(APIView):
    """
    POST /api/auth/password-reset {"email"}
    Always answers the same way so accounts cannot be probed.
    """
    authentication_classes = []

    def post(self, request):
        try:
            identity.send_password_reset(request.data.get("email"))
        except SMTPException:
            logger.exception("Password reset email failed")
            return Response(
                {"detail": "Could not send the reset email. Please try again."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )
        return Response(
            {"detail": "If an account exists for that email, a reset link has been sent."},
            status=status.HTTP_200_OK,
        )


@method_decorator(csrf_exempt, name="dispatch")
class PasswordResetConfirmView(APIView):
    """
    POST /api/auth/password-reset/confirm {"uid", "token", "new_password"}
    """
    authentication_classes = []

    def post(self, request):
        data = request.data
        try:
            identity.reset_password(data.get("uid", ""), data.get("token", ""), data.get("new_password", ""))
        except IdentityError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"detail": "Password updated."}, status=status.HTTP_200_OK)
