"""
Human-readable rendering of stored multi-category values
"""
from __future__ import annotations

import logging
from typing import Any

from .data import EMPTY, EmptyDisplay
from .hierarchy import CategoryProvider, get_default_provider
from .membership import decode
from .models.utils import DISPLAY_SEPARATOR

log = logging.getLogger(__name__)


def get_category_names(value: Any, provider: CategoryProvider | None = None) -> list[str]:
    """
    Returns the names of the categories in a stored value, in stored order.

    Categories that have been deleted since the value was saved are skipped.
    """
    provider = provider or get_default_provider()
    names = []
    for category_id in decode(value):
        category = provider.get_category(category_id)
        if category is None:
            log.debug(f"Skipping missing category {category_id} when displaying {value!r}")
            continue
        names.append(category.name)
    return names


def project(value: Any, provider: CategoryProvider | None = None) -> str | EmptyDisplay:
    """
    Returns the category names of a stored value joined for display, e.g. "Biology, Chemistry".

    Returns EMPTY if no category in the value still exists, or the value is
    empty or malformed. Never raises.
    """
    names = get_category_names(value, provider)
    if not names:
        return EMPTY
    return DISPLAY_SEPARATOR.join(names)
