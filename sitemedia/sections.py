"""
Media slots each public page exposes.

Sections either have subsections (each with a fixed slot count and media
type) or are flat (gallery: images, open-ended count).
"""

from .models import SiteMedia

SITE_SECTIONS = {
    "home": {
        "label": "Home",
        "subsections": {
            "hero-video": {"label": "Hero Video", "count": 1, "media_type": SiteMedia.VIDEO},
            "our-services": {"label": "Our Services", "count": 3, "media_type": SiteMedia.IMAGE},
            "best-designs": {"label": "Our Best Designs", "count": 4, "media_type": SiteMedia.IMAGE},
            "our-artistry": {"label": "Our Artistry", "count": 2, "media_type": SiteMedia.IMAGE},
        },
    },
    "services": {
        "label": "Our Henna Services",
        "subsections": {
            "design-complexity": {"label": "Design Complexity", "count": 3, "media_type": SiteMedia.IMAGE},
            "types-of-henna": {"label": "Types of Henna Services", "count": 4, "media_type": SiteMedia.IMAGE},
        },
    },
    "gallery": {
        "label": "Gallery",
        "count": None,
        "media_type": SiteMedia.IMAGE,
    },
}


def slot_rule(section, subsection=None):
    """
    Return the {"count", "media_type"} entry for a coordinate, or None when
    the section/subsection pair does not exist.
    """
    entry = SITE_SECTIONS.get(section)
    if entry is None:
        return None
    subsections = entry.get("subsections")
    if subsections:
        return subsections.get(subsection) if subsection else None
    return None if subsection else entry
