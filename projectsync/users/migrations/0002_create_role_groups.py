"""
Data migration creating one auth group per ProjectSync role.
"""

from django.db import migrations

ROLE_GROUPS = [
    "student",
    "supervisor",
    "pmo",
    "external_panel",
    "exam_cell",
    "admin",
]


def create_role_groups(apps, schema_editor):
    Group = apps.get_model("auth", "Group")
    for role_name in ROLE_GROUPS:
        Group.objects.get_or_create(name=role_name)


def remove_role_groups(apps, schema_editor):
    Group = apps.get_model("auth", "Group")
    Group.objects.filter(name__in=ROLE_GROUPS).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("users", "0001_initial"),
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.RunPython(create_role_groups, remove_role_groups),
    ]
