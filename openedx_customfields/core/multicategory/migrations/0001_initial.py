import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("name", models.CharField(help_text="User-facing name of the category.", max_length=255)),
                (
                    "sortorder",
                    models.PositiveIntegerField(default=0, help_text="Position of this category among its siblings."),
                ),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        default=None,
                        help_text="Category that lives one level up from the current category, forming a hierarchy.",
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="children",
                        to="oel_multicategory.category",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Categories",
            },
        ),
        migrations.CreateModel(
            name="CategoryField",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "shortname",
                    models.SlugField(
                        help_text="Unique identifier for the field, used in form element names and exports.",
                        max_length=100,
                        unique=True,
                    ),
                ),
                ("name", models.CharField(help_text="User-facing label of the field.", max_length=255)),
                (
                    "description",
                    models.TextField(blank=True, help_text="Provides extra information for authors filling in this field."),
                ),
                (
                    "configdata",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Field-type specific configuration, e.g. the parent category restriction.",
                    ),
                ),
                ("created", models.DateTimeField(auto_now_add=True)),
                ("modified", models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name="CategoryFieldData",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "object_id",
                    models.CharField(
                        db_index=True,
                        help_text="Identifier for the object (e.g. course) this value is attached to",
                        max_length=255,
                    ),
                ),
                (
                    "value",
                    models.TextField(blank=True, default="", help_text="Comma-separated IDs of the selected categories."),
                ),
                ("created", models.DateTimeField(auto_now_add=True)),
                ("modified", models.DateTimeField(auto_now=True)),
                (
                    "field",
                    models.ForeignKey(
                        help_text="Field that this value belongs to.",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="data",
                        to="oel_multicategory.categoryfield",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "Category field data",
                "unique_together": {("field", "object_id")},
            },
        ),
        migrations.AddIndex(
            model_name="category",
            index=models.Index(fields=["parent", "sortorder"], name="oel_multicat_parent_sort_idx"),
        ),
    ]
