"""
Template detection — Files that are scaffolding, not graph content

A template carries placeholder tokens such as [ENTITY_NAME]. Templates are
counted but excluded from every check.
"""

from typing import Iterable, Optional, Tuple

from .parsing import strip_comments


DEFAULT_PLACEHOLDERS: Tuple[str, ...] = (
    "[ENTITY_TYPE]",
    "[ENTITY_NAME]",
    "[PLACEHOLDER]",
    "[SYMBOL_NAME]",
    "[PROPERTY_NAME]",
)

TEMPLATE_WARNING = "This file is a template"


def find_placeholder(text: str, placeholders: Optional[Iterable[str]] = None) -> Optional[str]:
    """Return the first placeholder token found outside comments, or None."""
    tokens = DEFAULT_PLACEHOLDERS if placeholders is None else tuple(placeholders)
    body = strip_comments(text)
    for token in tokens:
        if token and token in body:
            return token
    return None


def is_template(text: str, placeholders: Optional[Iterable[str]] = None) -> bool:
    return find_placeholder(text, placeholders) is not None
