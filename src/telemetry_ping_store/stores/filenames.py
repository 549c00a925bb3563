"""Bijective mapping between ping IDs and on-disk file names.

A ping with ID ``n`` lives in ``ping-<n>.json`` where ``<n>`` is the
canonical decimal form of ``n``.  Neither the prefix nor the suffix
contains a digit, so the ID is the only digit run in the name and the
generic extraction pattern ``[^0-9]*([0-9]+)[^0-9]*`` recovers it.
"""

from __future__ import annotations

import re

FILENAME_PREFIX = "ping-"
FILENAME_SUFFIX = ".json"

# Canonical decimal only: "ping-007.json" would break the bijection.
_FILENAME_RE = re.compile(
    rf"^{re.escape(FILENAME_PREFIX)}(0|[1-9][0-9]*){re.escape(FILENAME_SUFFIX)}$"
)


def validate_ping_id(ping_id: object) -> int:
    """Return *ping_id* if it is a legal ID, else raise :class:`ValueError`."""
    # bool is an int subclass but never a meaningful ID.
    if isinstance(ping_id, bool) or not isinstance(ping_id, int):
        raise ValueError(f"ping id must be an int, got {type(ping_id).__name__}")
    if ping_id < 0:
        raise ValueError(f"ping id must be non-negative, got {ping_id}")
    return ping_id


def filename_for_id(ping_id: int) -> str:
    """Return the file name that stores the ping with *ping_id*."""
    return f"{FILENAME_PREFIX}{validate_ping_id(ping_id)}{FILENAME_SUFFIX}"


def is_ping_filename(name: str) -> bool:
    """Return True if *name* is a file name produced by :func:`filename_for_id`."""
    return _FILENAME_RE.match(name) is not None


def id_from_filename(name: str) -> int:
    """Return the ping ID encoded in *name*.

    Raises
    ------
    ValueError
        If *name* was not produced by :func:`filename_for_id`.
    """
    match = _FILENAME_RE.match(name)
    if match is None:
        raise ValueError(f"not a ping file name: {name!r}")
    return int(match.group(1))
