"""
site_settings.py
----------------
Read/write helpers for the singleton settings documents.

- A missing document reads as its defaults (empty strings), never an error.
- Writes replace the whole document (last write wins); unknown fields are
  dropped, missing fields fall back to defaults.
"""

from .models import SiteSetting

DEFAULTS = {
    "address": {"value": ""},
    "contactInfo": {"email": "", "phone": "", "mapUrl": "", "googleMapsLink": ""},
    "general": {"businessName": "", "contactEmail": "", "phoneNumber": ""},
}

# Documents anyone may read; the rest are admin-only.
PUBLIC_KEYS = {"address", "contactInfo"}


def is_known(key) -> bool:
    return key in DEFAULTS


def get_setting(key):
    if not is_known(key):
        raise KeyError(key)
    data = dict(DEFAULTS[key])
    row = SiteSetting.objects.filter(key=key).first()
    if row and isinstance(row.value, dict):
        data.update({k: v for k, v in row.value.items() if k in data})
    return data


def put_setting(key, values):
    if not is_known(key):
        raise KeyError(key)
    data = dict(DEFAULTS[key])
    data.update({k: "" if v is None else str(v) for k, v in (values or {}).items() if k in data})
    SiteSetting.objects.update_or_create(key=key, defaults={"value": data})
    return data
