"""Unit tests for reconciler.group_provisioner module."""

from unittest.mock import Mock, call

import pytest

from roster_sync.reconciler.group_provisioner import GroupProvisioner, find_missing_groups
from roster_sync.reconciler.models import DEFAULT_GROUP_ID, RemoteUserRecord
from tests.fixtures import make_group


def pending(email, target):
    return RemoteUserRecord(
        email=email, group_id=DEFAULT_GROUP_ID, group_name="Default", pending_group_name=target
    )


class TestFindMissingGroups:
    """Test cases for find_missing_groups()."""

    def test_lists_targets_absent_from_directory(self):
        groups = [make_group(DEFAULT_GROUP_ID, "Default"), make_group(5, "Admins")]
        to_move = [pending("a@x.io", "Admins"), pending("b@x.io", "Engineers")]

        assert find_missing_groups(to_move, groups) == ["Engineers"]

    def test_distinct_in_discovery_order(self):
        groups = [make_group(DEFAULT_GROUP_ID, "Default")]
        to_move = [
            pending("a@x.io", "Sales"),
            pending("b@x.io", "Engineers"),
            pending("c@x.io", "Sales"),
        ]

        assert find_missing_groups(to_move, groups) == ["Sales", "Engineers"]

    def test_exact_name_comparison(self):
        groups = [make_group(DEFAULT_GROUP_ID, "Default"), make_group(5, "admins")]

        assert find_missing_groups([pending("a@x.io", "Admins")], groups) == ["Admins"]

    def test_nothing_missing(self):
        groups = [make_group(DEFAULT_GROUP_ID, "Default")]
        assert find_missing_groups([pending("a@x.io", "Default")], groups) == []
        assert find_missing_groups([], groups) == []


class TestGroupProvisioner:
    """Test cases for GroupProvisioner.provision()."""

    @pytest.fixture
    def mock_api(self):
        api = Mock()
        api.fetch_groups.return_value = [
            make_group(DEFAULT_GROUP_ID, "Default"),
            make_group(12, "Engineers"),
        ]
        return api

    def test_creates_each_group_then_refetches(self, mock_api):
        """Groups are created in order, then the listing is fetched once."""
        provisioner = GroupProvisioner(mock_api)

        groups = provisioner.provision(["Engineers", "Sales"])

        assert mock_api.create_group.call_args_list == [call("Engineers"), call("Sales")]
        mock_api.fetch_groups.assert_called_once_with()
        assert [g.name for g in groups] == ["Default", "Engineers"]

    def test_api_is_required(self):
        with pytest.raises(TypeError):
            GroupProvisioner()

    def test_duplicate_names_created_once(self, mock_api):
        GroupProvisioner(mock_api).provision(["Sales", "Sales"])

        mock_api.create_group.assert_called_once_with("Sales")

    def test_creation_failure_propagates(self, mock_api):
        """A failing creation stops provisioning; no refetch happens."""
        mock_api.create_group.side_effect = [None, RuntimeError("boom")]

        with pytest.raises(RuntimeError, match="boom"):
            GroupProvisioner(mock_api).provision(["Engineers", "Sales", "Ops"])

        assert mock_api.create_group.call_count == 2
        mock_api.fetch_groups.assert_not_called()
