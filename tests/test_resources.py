"""Tests for resource wrappers and the pair store."""

import logging
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from gl_importer.errors import AnnotationError
from gl_importer.models import (
    EXTERNAL_NAME_ANNOTATION,
    MANAGED_EXTERNAL_NAME_ANNOTATION,
    PROJECT_API_GROUP,
    ConditionStatus,
    ResourceKind,
)
from gl_importer.resources import DesiredResource, ObservedResource, ResourcePairStore


class TestObservedResource:
    """Tests for parsing observed resources."""

    def test_from_dict(self, make_project):
        body = make_project(annotations={EXTERNAL_NAME_ANNOTATION: "42"}, synced=("False", "boom"))
        observed = ObservedResource.from_dict(body)

        assert observed.api_group == PROJECT_API_GROUP
        assert observed.resource_kind == ResourceKind.PROJECT
        assert observed.external_name == "42"
        assert observed.condition().status == ConditionStatus.FALSE
        assert observed.condition().message == "boom"
        assert observed.for_provider["path"] == "demo"

    def test_snapshot_is_read_only(self, make_project):
        """Later changes to the request document do not leak into the snapshot."""
        body = make_project()
        observed = ObservedResource.from_dict(body)
        body["spec"]["forProvider"]["path"] = "changed"

        assert observed.for_provider["path"] == "demo"
        with pytest.raises(TypeError):
            observed.annotations["x"] = "y"

    def test_unknown_kind(self):
        observed = ObservedResource.from_dict({"apiVersion": "v1", "kind": "ConfigMap"})
        assert observed.api_group == ""
        assert observed.resource_kind == ResourceKind.OTHER
        assert observed.condition().status == ConditionStatus.UNKNOWN


class TestDesiredResource:
    """Tests for mutating desired resources."""

    def test_set_external_name_is_idempotent(self, make_project):
        desired = DesiredResource(make_project())
        desired.set_external_name("7")
        first = dict(desired.annotations)
        desired.set_external_name("7")

        assert desired.annotations == first == {EXTERNAL_NAME_ANNOTATION: "7"}

    def test_empty_external_name_rejected(self, make_project):
        desired = DesiredResource(make_project())
        with pytest.raises(AnnotationError):
            desired.set_external_name("")
        assert desired.external_name == ""
        assert EXTERNAL_NAME_ANNOTATION not in desired.annotations

    def test_keeps_other_annotations(self, make_project):
        desired = DesiredResource(make_project(annotations={"team": "platform"}))
        desired.set_external_name("7")
        assert desired.annotations == {"team": "platform", EXTERNAL_NAME_ANNOTATION: "7"}

    def test_mark_managed(self, make_project):
        desired = DesiredResource(make_project())
        desired.mark_managed(["Observe", "Update"])

        assert desired.annotations[MANAGED_EXTERNAL_NAME_ANNOTATION] == "true"
        assert desired.body["spec"]["managementPolicies"] == ["Observe", "Update"]

    def test_mark_managed_without_policies(self, make_project):
        desired = DesiredResource(make_project())
        desired.mark_managed([])

        assert "managementPolicies" not in desired.body["spec"]

    def test_round_trip_keeps_ready(self, make_project):
        desired = DesiredResource.from_dict({"resource": make_project(), "ready": "READY_TRUE"})
        assert desired.to_dict()["ready"] == "READY_TRUE"

    def test_from_dict_copies(self, make_project):
        entry = {"resource": make_project()}
        desired = DesiredResource.from_dict(entry)
        desired.set_external_name("7")
        assert "annotations" not in entry["resource"]["metadata"]


class TestResourcePairStore:
    """Tests for pairing observed and desired resources."""

    def test_pairs_only_common_names(self, make_project, make_group, make_request, caplog):
        """Names on one side only are excluded and logged."""
        request = make_request(
            observed={"project": make_project(), "orphan": make_group()},
            desired={"project": make_project(), "new-group": make_group()},
        )
        store = ResourcePairStore.from_request(request)

        with caplog.at_level(logging.INFO, logger="gl-importer"):
            pairs = list(store.pairs())

        assert [name for name, _, _ in pairs] == ["project"]
        assert "orphan" in caplog.text
        assert "new-group" in caplog.text

    def test_pairs_sorted(self, make_project, make_request):
        request = make_request(
            observed={"b": make_project(), "a": make_project()},
            desired={"a": make_project(), "b": make_project()},
        )
        store = ResourcePairStore.from_request(request)

        assert [name for name, _, _ in store.pairs()] == ["a", "b"]

    def test_pairs_share_desired_instance(self, make_project, make_request):
        store = ResourcePairStore.from_request(make_request({"a": make_project()}, {"a": make_project()}))
        _, _, desired = next(store.pairs())
        assert desired is store.desired["a"]

    def test_empty_request(self):
        store = ResourcePairStore.from_request({})
        assert list(store.pairs()) == []

    def test_malformed_entry(self):
        with pytest.raises(ValueError):
            ResourcePairStore.from_request({"observed": {"resources": {"a": {"nope": {}}}}})
