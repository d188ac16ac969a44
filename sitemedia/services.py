"""
services.py
-----------
Site media uploads and removals.

- The media type is derived from the upload's content type
  (image/* -> image, video/* -> video; anything else is refused) and must
  match the slot.
- Uploading to an occupied (section, subsection, index, media_type)
  coordinate stores the new file first; the old rows go in the same
  transaction and their stored files are deleted once it commits.
- Deleting removes the record and the stored file.
"""

import logging
import os
from functools import partial

from django.db import DatabaseError, transaction

from .models import SiteMedia
from .sections import slot_rule

logger = logging.getLogger(__name__)


class MediaError(ValueError):
    """Raised when an upload targets an invalid slot."""


def media_type_for(content_type):
    content_type = (content_type or "").lower()
    if content_type.startswith("image/"):
        return SiteMedia.IMAGE
    if content_type.startswith("video/"):
        return SiteMedia.VIDEO
    raise MediaError(f"Unsupported file type '{content_type or 'unknown'}'. Upload an image or a video.")


def media_name(section, subsection, media_type, index):
    return f"{section}_{subsection or ''}_{media_type} {index}"


def stored_filename(name, upload):
    extension = os.path.splitext(getattr(upload, "name", "") or "")[1].lower()
    return name.replace(" ", "_") + extension


def validate_slot(section, subsection, index, media_type):
    rule = slot_rule(section, subsection)
    if rule is None:
        raise MediaError(f"Unknown media slot '{section}/{subsection or '-'}'.")
    if rule["media_type"] != media_type:
        raise MediaError(f"This slot takes a {rule['media_type']}, not a {media_type}.")
    count = rule.get("count")
    if index < 0 or (count is not None and index >= count):
        raise MediaError(f"Slot index {index} is out of range.")


def _remove_file(item):
    if item.file:
        item.file.delete(save=False)


@transaction.atomic
def upload_media(section, subsection, index, upload):
    """
    Store an uploaded file at a slot coordinate, replacing what was there.

    A failed store leaves the previous item and its file untouched.
    """
    subsection = subsection or None
    media_type = media_type_for(getattr(upload, "content_type", ""))
    validate_slot(section, subsection, index, media_type)

    existing = list(SiteMedia.objects.filter(
        section=section, subsection=subsection, index=index, media_type=media_type,
    ))

    name = media_name(section, subsection, media_type, index)
    item = SiteMedia(
        name=name,
        section=section,
        subsection=subsection,
        index=index,
        media_type=media_type,
    )
    item.file.save(stored_filename(name, upload), upload, save=False)
    try:
        item.save()
    except DatabaseError:
        _remove_file(item)
        raise

    for old in existing:
        logger.info("Replacing media %s (id=%s)", old.name, old.pk)
        if old.file:
            transaction.on_commit(partial(old.file.storage.delete, old.file.name))
        old.delete()

    logger.info("Stored media %s", name)
    return item


def delete_media(item):
    _remove_file(item)
    item.delete()
    logger.info("Deleted media %s", item.name)
