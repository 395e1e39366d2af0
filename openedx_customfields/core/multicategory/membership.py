"""
Conversion between selected category IDs and the stored field value.

The stored value is a single string of comma-separated category IDs, e.g.
"4,12,7". An empty string means nothing is selected.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from .data import Absent, MultiValue, SelectableSet, SingleValue, Submission
from .hierarchy import CategoryProvider, resolve_selectable
from .models.utils import VALUE_SEPARATOR, is_category_id_token, parse_category_id

log = logging.getLogger(__name__)


def encode(category_ids: Iterable[Any]) -> str:
    """
    Joins the given category IDs into a stored field value.
    """
    return VALUE_SEPARATOR.join(str(category_id) for category_id in category_ids)


def decode(value: Any) -> list[str]:
    """
    Splits a stored field value into its category IDs, as strings.

    Empty and non-numeric entries are dropped. This never raises, whatever the
    stored value contains.
    """
    if not value or not isinstance(value, str):
        return []
    return [token for token in value.split(VALUE_SEPARATOR) if is_category_id_token(token)]


def normalize_category_ids(candidate_ids: Iterable[Any]) -> list[int]:
    """
    Converts submitted category IDs to ints, dropping invalid and duplicate ones.

    The order of first appearance is kept.
    """
    category_ids = []
    for candidate in candidate_ids:
        category_id = parse_category_id(candidate)
        if category_id is None:
            log.debug(f"Ignoring invalid category ID: {candidate!r}")
            continue
        category_ids.append(category_id)
    return list(dict.fromkeys(category_ids))  # Remove duplicates preserving order


def filter_against_selectable(candidate_ids: Iterable[Any], selectable: SelectableSet) -> list[int]:
    """
    Keeps only the submitted category IDs that are selectable.

    The submission order is kept (not the order of `selectable`). Invalid
    entries are dropped without raising.
    """
    return [
        category_id
        for category_id in normalize_category_ids(candidate_ids)
        if category_id in selectable
    ]


def build_membership_value(
    submission: Submission,
    restriction: int,
    provider: CategoryProvider | None = None,
) -> str:
    """
    Returns the value to store for a submitted selection.

    A submission that isn't a list of IDs stores an empty selection. If the
    field is restricted to a parent category, IDs outside that category's
    subtree are dropped. Unrestricted fields store the submitted IDs without
    checking them against the category tree.
    """
    if isinstance(submission, (Absent, SingleValue)):
        return ""
    if not isinstance(submission, MultiValue):
        raise TypeError(f"Expected a Submission, not {type(submission).__name__}.")

    if not restriction:
        return encode(normalize_category_ids(submission.values))

    selectable = resolve_selectable(restriction, provider)
    candidate_ids = normalize_category_ids(submission.values)
    category_ids = filter_against_selectable(candidate_ids, selectable)
    dropped = len(candidate_ids) - len(category_ids)
    if dropped:
        log.info(f"Dropped {dropped} category ID(s) outside parent category {restriction}.")
    return encode(category_ids)
