"""Tests for the typed finder options."""

import uuid

import pytest

from vault_plane.core.exceptions import InvalidInputException
from vault_plane.models import ROOT_ID
from vault_plane.schemas.find_options import FindIndexOptions, MetadataUpgradeOptions


class TestFindIndexOptions:
    """Tests for FindIndexOptions.create()."""

    def test_empty(self):
        options = FindIndexOptions.create(None)

        assert options.filter.model_dump(exclude_none=True) == {}
        assert options.contain.model_dump(exclude_none=True) == {}
        assert options.order.resources_modified is None

    def test_dashed_and_dotted_keys(self):
        resource_id = str(uuid.uuid4())
        options = FindIndexOptions.create({
            "filter": {"has-id": [resource_id], "is-favorite": "false", "has-parent": [ROOT_ID]},
            "contain": {"permissions.user.profile": 1, "resource-type": True},
            "order": {"Resources.modified": "DESC"},
        })

        assert options.filter.has_id == [resource_id]
        assert options.filter.is_favorite is False
        assert options.filter.has_parent == [ROOT_ID]
        assert options.contain.permissions_user_profile == 1
        assert options.contain.resource_type is True
        assert options.order.resources_modified == "DESC"

    def test_unknown_keys_are_dropped(self):
        options = FindIndexOptions.create({"filter": {"search": "bank"}, "limit": 10})

        assert options.filter.model_dump(exclude_none=True) == {}

    def test_contain_counts_when_present_whatever_its_value(self):
        options = FindIndexOptions.create({"contain": {"permission": False, "secret": 0, "creator": None}})

        assert options.contain.model_dump(exclude_none=True) == {"permission": False, "secret": 0}

    def test_create_copies_existing_options(self):
        original = FindIndexOptions.create({"contain": {"permission": True}})
        copy = FindIndexOptions.create(original)
        copy.user_id = str(uuid.uuid4())

        assert copy.contain.permission is True
        assert original.user_id is None

    @pytest.mark.parametrize("raw", [
        {"filter": {"has-id": ["nope"]}},
        {"filter": {"has-parent": ["nope"]}},
        {"filter": {"is-favorite": "perhaps"}},
        "filter",
    ])
    def test_invalid_options(self, raw):
        with pytest.raises(InvalidInputException):
            FindIndexOptions.create(raw)


def test_upgrade_options():
    options = MetadataUpgradeOptions.create({"filter": {"is-shared": True}, "contain": {"permissions": True}})

    assert options.filter.is_shared is True
    assert options.contain.permissions is True
