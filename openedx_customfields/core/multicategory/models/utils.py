"""
Utilities for multi-category models
"""
from __future__ import annotations

import re
from typing import Any

# Joins the names of a category and its ancestors in a qualified label,
# e.g. "Science / Biology / Genetics"
PATH_SEPARATOR = " / "

# Separates category IDs in the persisted field value, e.g. "4,12,7"
VALUE_SEPARATOR = ","

# Joins category names when a field value is displayed, e.g. "Biology, Chemistry"
DISPLAY_SEPARATOR = ", "

RESERVED_OBJECT_ID_CHARS = [
    ',',  # Used by APIs that accept a "comma,separated,list" of object IDs
    '*',  # Reserved for wildcard matches on object IDs
]

# configdata key which holds the ID of the category that restricts a field's selectable categories
PARENT_CATEGORY_KEY = "parent_category"

# Largest ID a category can have (BigAutoField); larger IDs can never resolve.
MAX_CATEGORY_ID = 2**63 - 1

_CATEGORY_ID_RE = re.compile(r"[0-9]+")


def is_category_id_token(token: str) -> bool:
    """
    Is this text made only of ASCII decimal digits? (Unlike str.isdigit(), "²" doesn't count.)
    """
    return bool(_CATEGORY_ID_RE.fullmatch(token))


def parse_category_id(category_id: Any) -> int | None:
    """
    Convert a submitted or stored category ID into an int.

    Returns None for anything that can't be the ID of a category: negative or
    out-of-range numbers, booleans, and text that isn't a plain decimal number.
    """
    if isinstance(category_id, bool):
        return None
    if isinstance(category_id, int):
        pk = category_id
    elif isinstance(category_id, str) and is_category_id_token(category_id.strip()):
        pk = int(category_id.strip())
    else:
        return None
    if pk < 0 or pk > MAX_CATEGORY_ID:
        return None
    return pk


def is_unrestricted(parent_category_id: Any) -> bool:
    """
    Does this parent category setting mean "every category may be selected"?

    True for None, "" and anything that parses to category ID 0, e.g. 0 or "0".
    """
    if parent_category_id is None or parent_category_id == "":
        return True
    return parse_category_id(parent_category_id) == 0
