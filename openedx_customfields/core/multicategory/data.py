"""
Data types used by openedx-customfields multi-category fields
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping, Tuple, Union

from attrs import field, frozen
from typing_extensions import Protocol, TypeAlias

# Ordered mapping of category ID -> qualified label, e.g. {3: "Science", 7: "Science / Biology"}.
# Insertion order is tree order: each category comes before its children.
SelectableSet: TypeAlias = Dict[int, str]


class CategoryNode(Protocol):
    """
    The attributes of a category that the resolver and projector read.

    Category model instances satisfy this, as does any other node object a
    hierarchy provider chooses to return.
    """
    id: int
    name: str


class EmptyDisplay(Enum):
    """
    Result of projecting a field value that has no displayable categories.

    It is falsy and renders as an empty string, but it is neither "" nor None,
    so callers can tell "nothing to display" apart from "no value stored".
    """
    EMPTY = "empty"

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""


EMPTY = EmptyDisplay.EMPTY


@frozen
class Absent:
    """
    The field was not part of the submitted data at all.
    """


@frozen
class SingleValue:
    """
    The field was submitted as a single scalar rather than a list of IDs.
    """
    value: Any


@frozen
class MultiValue:
    """
    The field was submitted as a collection of category IDs.
    """
    values: Tuple[Any, ...] = field(converter=tuple)


Submission: TypeAlias = Union[Absent, SingleValue, MultiValue]


def submission_from_raw(raw: Any) -> Submission:
    """
    Classify a raw submitted value, e.g. request.data.get("category_ids").

    None means the value was missing. Lists and tuples are multi-value
    submissions; anything else (a string, a number, a dict) is a single value.
    """
    if raw is None:
        return Absent()
    if isinstance(raw, (list, tuple)):
        return MultiValue(raw)
    return SingleValue(raw)


def submission_from_form(data: Mapping[str, Any], element_name: str) -> Submission:
    """
    Classify the submitted value for `element_name` in a form's cleaned data.

    QueryDicts are read with getlist() so that repeated keys become a
    multi-value submission.
    """
    if element_name not in data:
        return Absent()
    getlist = getattr(data, "getlist", None)
    if getlist is not None:
        return MultiValue(getlist(element_name))
    return submission_from_raw(data[element_name])
