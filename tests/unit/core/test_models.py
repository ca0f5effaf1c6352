"""Unit tests for BaseModel.

Uses a concrete test model created via Django's SchemaEditor so we can
exercise the abstract class against a real database.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from freezegun import freeze_time

from django.db import connection, models
from django.utils import timezone

from modules.core.models import BaseModel

pytestmark = pytest.mark.unit


class ConcreteBaseModel(BaseModel):
    name = models.CharField(max_length=100)

    class Meta(BaseModel.Meta):
        app_label = "core"
        db_table = "test_concrete_base"


@pytest.fixture(scope="session")
def _test_tables(django_db_setup, django_db_blocker):
    """Create the DB table for the concrete test model (idempotent for --reuse-db)."""
    with django_db_blocker.unblock():
        with connection.schema_editor() as editor:
            if ConcreteBaseModel._meta.db_table not in connection.introspection.table_names():
                editor.create_model(ConcreteBaseModel)


@pytest.fixture(autouse=True)
def _use_test_tables(_test_tables):
    """Ensure the test table exists for every test in this module."""


class TestBaseModel:
    """Tests for UUIDv7 PK and timestamp behaviour."""

    def test_id_is_uuid_version_7(self):
        obj = ConcreteBaseModel.objects.create(name="test")
        assert isinstance(obj.id, uuid.UUID)
        assert obj.id.version == 7

    def test_ids_are_time_ordered(self):
        a = ConcreteBaseModel.objects.create(name="first")
        b = ConcreteBaseModel.objects.create(name="second")
        assert str(a.id) < str(b.id)

    def test_id_is_assigned_before_save(self):
        assert ConcreteBaseModel(name="unsaved").id is not None

    def test_id_is_not_editable(self):
        assert ConcreteBaseModel._meta.get_field("id").editable is False

    def test_timestamps_set_on_create(self):
        obj = ConcreteBaseModel.objects.create(name="test")
        assert obj.created_at is not None
        assert obj.updated_at is not None

    def test_updated_at_changes_on_save(self):
        with freeze_time("2025-06-15 12:00:00") as frozen:
            obj = ConcreteBaseModel.objects.create(name="original")
            created = obj.created_at
            frozen.tick(timedelta(seconds=5))
            obj.name = "modified"
            obj.save()
        obj.refresh_from_db()
        assert obj.updated_at == created + timedelta(seconds=5)
        assert obj.created_at == created

    def test_save_with_update_fields_includes_updated_at(self):
        """The save() guard must inject updated_at into update_fields."""
        with freeze_time("2025-06-15 12:00:00") as frozen:
            obj = ConcreteBaseModel.objects.create(name="original")
            frozen.tick(timedelta(minutes=1))
            obj.name = "modified"
            obj.save(update_fields=["name"])
            expected = timezone.now()
        obj.refresh_from_db()
        assert obj.name == "modified"
        assert obj.updated_at == expected
