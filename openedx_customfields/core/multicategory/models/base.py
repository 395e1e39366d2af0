"""
Multi-category custom field base data models
"""
from __future__ import annotations

from typing import List

from django.core.exceptions import ValidationError
from django.db import models
from django.utils.functional import cached_property
from django.utils.translation import gettext_lazy as _

from .utils import PARENT_CATEGORY_KEY, PATH_SEPARATOR, RESERVED_OBJECT_ID_CHARS, parse_category_id


# Names of a given category and its parents, starting from the root.
Lineage = List[str]


class Category(models.Model):
    """
    A single node in the tree of categories that content objects (e.g. courses) are filed under.

    A multi-category field lets authors pick any number of these for an object.
    """

    id = models.BigAutoField(primary_key=True)
    name = models.CharField(
        max_length=255,
        help_text=_("User-facing name of the category."),
    )
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        default=None,
        on_delete=models.CASCADE,
        related_name="children",
        help_text=_(
            "Category that lives one level up from the current category, forming a hierarchy."
        ),
    )
    sortorder = models.PositiveIntegerField(
        default=0,
        help_text=_("Position of this category among its siblings."),
    )

    class Meta:
        verbose_name_plural = "Categories"
        indexes = [
            models.Index(fields=["parent", "sortorder"], name="oel_multicat_parent_sort_idx"),
        ]

    def __repr__(self):
        """
        Developer-facing representation of a Category.
        """
        return str(self)

    def __str__(self):
        """
        User-facing string representation of a Category.
        """
        return f"<{self.__class__.__name__}> ({self.id}) {self.name}"

    def get_lineage(self) -> Lineage:
        """
        Queries and returns the lineage of the current category as a list of names.

        The root category's name is first, followed by its child's name, and on down to self.name.
        """
        lineage: Lineage = [self.name]
        seen = {self.pk}
        ancestor = self.parent
        # Stop at the first repeated ancestor.
        while ancestor and ancestor.pk not in seen:
            seen.add(ancestor.pk)
            lineage.insert(0, ancestor.name)
            ancestor = ancestor.parent
        return lineage

    def get_path(self, separator: str = PATH_SEPARATOR) -> str:
        """
        Returns the qualified label of this category, e.g. "Science / Biology".
        """
        return separator.join(self.get_lineage())

    @cached_property
    def depth(self) -> int:
        """
        How many ancestors this Category has. Zero for root categories.
        """
        return len(self.get_lineage()) - 1

    def clean(self):
        """
        Validate this category before saving
        """
        self.name = self.name.strip()
        if not self.name:
            raise ValidationError(_("Category names cannot be empty."))
        if self._parent_creates_cycle():
            raise ValidationError({"parent": _("A category cannot be its own ancestor.")})

    def _parent_creates_cycle(self) -> bool:
        """
        Would saving this category make it an ancestor of itself?
        """
        if self.pk is None:
            return False
        seen = set()
        ancestor = self.parent
        while ancestor is not None and ancestor.pk not in seen:
            if ancestor.pk == self.pk:
                return True
            seen.add(ancestor.pk)
            ancestor = ancestor.parent
        return False


class CategoryField(models.Model):
    """
    Definition of a multi-category custom field which can be attached to content objects.

    Field-specific settings live in `configdata`; currently the only one is
    "parent_category", which restricts the selectable categories to that
    category and its descendants.
    """

    id = models.BigAutoField(primary_key=True)
    shortname = models.SlugField(
        max_length=100,
        unique=True,
        help_text=_("Unique identifier for the field, used in form element names and exports."),
    )
    name = models.CharField(
        max_length=255,
        help_text=_("User-facing label of the field."),
    )
    description = models.TextField(
        blank=True,
        help_text=_("Provides extra information for authors filling in this field."),
    )
    configdata = models.JSONField(
        default=dict,
        blank=True,
        help_text=_("Field-type specific configuration, e.g. the parent category restriction."),
    )
    created = models.DateTimeField(auto_now_add=True)
    modified = models.DateTimeField(auto_now=True)

    def __repr__(self):
        """
        Developer-facing representation of a CategoryField.
        """
        return str(self)

    def __str__(self):
        """
        User-facing string representation of a CategoryField.
        """
        return f"<{self.__class__.__name__}> ({self.id}) {self.shortname}"

    @property
    def form_element_name(self) -> str:
        """
        Name of the form element that holds this field's submitted category IDs.
        """
        return f"customfield_{self.shortname}"

    @property
    def restriction(self) -> int:
        """
        ID of the category that restricts which categories may be selected, or 0 if unrestricted.

        Malformed configuration is treated as unrestricted.
        """
        configdata = self.configdata if isinstance(self.configdata, dict) else {}
        return parse_category_id(configdata.get(PARENT_CATEGORY_KEY)) or 0

    @restriction.setter
    def restriction(self, parent_category_id: int | None):
        """
        Stores the given parent category restriction in configdata.
        """
        configdata = dict(self.configdata) if isinstance(self.configdata, dict) else {}
        configdata[PARENT_CATEGORY_KEY] = int(parent_category_id or 0)
        self.configdata = configdata

    def clean(self):
        """
        Validate the field configuration.

        A restriction must point at an existing category. This is stricter than
        the runtime behaviour, where a restriction whose category was deleted
        afterwards simply makes nothing selectable.
        """
        super().clean()
        if self.configdata is None:
            self.configdata = {}
        if not isinstance(self.configdata, dict):
            raise ValidationError({"configdata": _("Field configuration must be a JSON object.")})

        # Imported here to avoid a circular import; the validator uses the hierarchy provider.
        from ..hierarchy import validate_parent_category  # pylint: disable=import-outside-toplevel
        try:
            validate_parent_category(self.configdata.get(PARENT_CATEGORY_KEY))
        except ValidationError as e:
            raise ValidationError({"configdata": e.messages}) from e


class CategoryFieldData(models.Model):
    """
    The categories selected for one content object in one CategoryField.

    The selection is stored as a single comma-separated list of category IDs in `value`.
    """

    id = models.BigAutoField(primary_key=True)
    field = models.ForeignKey(
        CategoryField,
        on_delete=models.CASCADE,
        related_name="data",
        help_text=_("Field that this value belongs to."),
    )
    object_id = models.CharField(
        max_length=255,
        db_index=True,
        help_text=_("Identifier for the object (e.g. course) this value is attached to"),
    )
    value = models.TextField(
        blank=True,
        default="",
        help_text=_("Comma-separated IDs of the selected categories."),
    )
    created = models.DateTimeField(auto_now_add=True)
    modified = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Category field data"
        unique_together = [
            ("field", "object_id"),
        ]

    def __repr__(self):
        """
        Developer-facing representation of a CategoryFieldData.
        """
        return str(self)

    def __str__(self):
        """
        User-facing string representation of a CategoryFieldData.
        """
        return f"<{self.__class__.__name__}> {self.object_id}: {self.field.shortname}={self.value}"

    def get_category_ids(self) -> list[str]:
        """
        Returns the stored category IDs, dropping any malformed entries.
        """
        from ..membership import decode  # pylint: disable=import-outside-toplevel
        return decode(self.value)

    def clean(self):
        """
        Validate this CategoryFieldData.
        """
        for reserved_char in RESERVED_OBJECT_ID_CHARS:
            if reserved_char in self.object_id:
                raise ValidationError(_("Object ID contains invalid characters"))
