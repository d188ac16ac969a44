# booking/tests/utils.py
#
# Small builders shared by the booking test modules.
#
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.contrib.auth.models import User
from django.utils import timezone

from accounts.models import AccountProfile
from booking.models import Service, TimeSlot


def make_user(email, verified=True, provider=AccountProfile.PROVIDER_PASSWORD):
    user = User.objects.create_user(username=email, email=email, password="Henna-pass-2025")
    AccountProfile.objects.create(user=user, email_verified=verified, provider=provider)
    return user


def make_admin():
    return make_user(settings.BOOTSTRAP_ADMIN_EMAIL)


def make_service(name="Hand Henna", simple="30.00", medium="50.00", hard="70.00"):
    return Service.objects.create(
        name=name,
        price_simple=Decimal(simple),
        price_medium=Decimal(medium),
        price_hard=Decimal(hard),
    )


def days_ahead(n):
    return timezone.localdate() + timedelta(days=n)


def make_slot(day, time="14:00", available=True):
    return TimeSlot.objects.create(date=day, time=time, is_available=available)
