"""Recipient and program name utilities."""

import re
from typing import Optional

# Corporate markers are matched case-sensitively as plain substrings
CORPORATE_MARKERS = ("Corp", "Ltd", "Inc")

OPERATIONAL_MARKERS = ("Services", "Agency", "Department", "Authority")


def normalize_name(name: Optional[str]) -> Optional[str]:
    """Collapse whitespace and strip a free-text name."""
    if name is None:
        return None
    name = re.sub(r"\s+", " ", str(name)).strip()
    return name or None


def slugify(*parts: str) -> str:
    """
    Build a stable identifier from one or more names.

    >>> slugify("HEALTH", "Senior Care")
    'health-senior-care'
    """
    text = " ".join(p for p in parts if p)
    text = re.sub(r"[^a-z0-9]+", "-", text.lower())
    return text.strip("-")


def is_corporate_name(name: str) -> bool:
    """Check whether a recipient name carries a corporate marker."""
    return any(marker in name for marker in CORPORATE_MARKERS)


def is_operational_name(name: str) -> bool:
    """Check whether a recipient name looks like a government operating body."""
    return any(marker in name for marker in OPERATIONAL_MARKERS)
