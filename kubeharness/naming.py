"""Turning arbitrary strings into valid resource names."""

from __future__ import annotations

import re

_MAX_NAME_LENGTH = 63
_INVALID_CHARS = re.compile(r"[^a-z0-9-]+")


def sanitize_name(name):
    """Return ``name`` as a valid DNS-1123 label.

    The name is lower-cased, runs of disallowed characters become a single
    hyphen, leading and trailing hyphens are removed and the result is cut to
    63 characters. Raises ``ValueError`` if nothing is left.
    """
    sanitized = _INVALID_CHARS.sub("-", name.lower()).strip("-")
    if len(sanitized) > _MAX_NAME_LENGTH:
        sanitized = sanitized[:_MAX_NAME_LENGTH].rstrip("-")
    if not sanitized:
        raise ValueError("sanitized name is empty")
    return sanitized