from django.urls import path

from .views import (
    CurrentIdentityView,
    GoogleSignInView,
    LoginView,
    LogoutView,
    PasswordResetConfirmView,
    PasswordResetRequestView,
    ResendVerificationView,
    SignupView,
    VerifyEmailView,
)

urlpatterns = [
    path("signup", SignupView.as_view()),
    path("login", LoginView.as_view()),
    path("google", GoogleSignInView.as_view()),
    path("logout", LogoutView.as_view()),
    path("me", CurrentIdentityView.as_view()),
    path("verify-email", VerifyEmailView.as_view()),
    path("verify-email/resend", ResendVerificationView.as_view()),
    path("password-reset", PasswordResetRequestView.as_view()),
    path("password-reset/confirm", PasswordResetConfirmView.as_view()),
]
