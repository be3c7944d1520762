"""
Name Heuristics

Helpers shared by ingestion, detection and the auto-fixers for cleaning
free-text entity references and classifying nodes by name.
"""

import re

_ENTITY_PREFIXES = ("SERVICE:", "DATABASE:")

_DB_NAME_LIKE = re.compile(r"(^db$)|(^database$)|(\bdb\b)|(\bdatabase\b)|(_db$)|(-db$)")

_DB_TYPES = {"db", "datastore", "data_store", "data-store", "database"}

_UI_MARKERS = ("ui", "web", "frontend", "page", "client", "browser")


def strip_entity_prefix(value: str) -> str:
    """
    Remove a leaked graph-id prefix such as ``SERVICE:foo`` or
    ``DATABASE : bar`` and trim whitespace.
    """
    text = (value or "").strip()
    upper = text.upper()
    for prefix in _ENTITY_PREFIXES:
        if upper.startswith(prefix):
            return text[len(prefix):].strip()

    # tolerate "SERVICE : foo"
    squashed_upper = upper.replace(" ", "")
    squashed = text.replace(" ", "")
    for prefix in _ENTITY_PREFIXES:
        if squashed_upper.startswith(prefix):
            return squashed[len(prefix):].strip()
    return text


def same_name(a: str, b: str) -> bool:
    """Case-insensitive comparison of two entity references."""
    return strip_entity_prefix(a).lower() == strip_entity_prefix(b).lower()


def normalize_type(value: str) -> str:
    """Collapse a free-text service type onto ``service`` or ``database``."""
    t = (value or "").strip().lower()
    return "database" if t in _DB_TYPES else "service"


def looks_like_database(name: str) -> bool:
    """Name-based guess that an entity is a data store rather than a service."""
    n = strip_entity_prefix(name).lower()
    if not n:
        return False
    return bool(_DB_NAME_LIKE.search(n)) or "database" in n


def is_ui_name(name: str) -> bool:
    """Name-based guess that an entity belongs to the UI / frontend layer."""
    n = strip_entity_prefix(name).lower()
    return any(marker in n for marker in _UI_MARKERS)
