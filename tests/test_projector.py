"""
Tests for the lazy manifest tree projection

Run with: pytest tests/test_projector.py -v
"""

import pytest
from lxml import etree

from apkview.manifest import projector
from apkview.manifest.exceptions import EmptyOrMissingRoot
from apkview.manifest.mapping import ANDROID_NAMESPACE
from apkview.manifest.projector import ExpansionState, flatten, project, project_root, walk
from apkview.manifest.serializer import serialize

RICH_MANIFEST = {
    "package": "com.example.app",
    "versionCode": 7,
    "versionName": "1.0",
    "usesSdk": {"minSdkVersion": 21, "targetSdkVersion": 30},
    "usesPermissions": [
        {"name": "android.permission.INTERNET"},
        {"name": "android.permission.CAMERA"},
    ],
    "application": {
        "label": "Example & Co",
        "allowBackup": True,
        "supportsRtl": True,
        "activities": [
            {
                "name": ".MainActivity",
                "exported": True,
                "intentFilters": [{
                    "actions": [{"name": "android.intent.action.MAIN"}],
                    "categories": [{"name": "android.intent.category.LAUNCHER"}],
                }],
            },
            {"name": ".SettingsActivity"},
        ],
        "launcherActivities": [{"name": ".MainActivity"}],
        "services": [],
        "metaData": [{"name": "k", "value": "v", "resource": "@3"}],
    },
}


def flatten_serialized(xml):
    """Pre-order (tag, attribute names) pairs read back from the XML text."""
    root = etree.fromstring(xml.encode("utf-8"))
    prefix = "{%s}" % ANDROID_NAMESPACE
    result = []
    for element in root.iter():
        names = []
        if element is root:
            names.append("xmlns:android")
        for key in element.attrib:
            names.append("android:" + key[len(prefix):] if key.startswith(prefix) else key)
        result.append((element.tag, names))
    return result


class TestRenderNode:
    """Tests for the projected view model."""

    def test_root(self, example_manifest):
        root = project_root(example_manifest)
        assert root.tag_name == "manifest"
        assert root.path == ()
        assert root.attributes == (
            ("xmlns:android", ANDROID_NAMESPACE),
            ("package", "com.example.app"),
            ("android:versionName", "1.0"),
        )
        assert root.child_tags == ["uses-sdk", "application"]

    def test_children(self, example_manifest):
        root = project_root(example_manifest)
        uses_sdk, application = root.children

        assert uses_sdk.attributes == (("android:minSdkVersion", "21"), ("android:targetSdkVersion", "30"))
        assert not uses_sdk.has_children
        assert application.path == (1,)

        activity = application.children[0]
        assert activity.tag_name == "activity"
        assert activity.attributes == (("android:name", ".MainActivity"), ("android:exported", "true"))
        assert activity.path == (1, 0)
        assert root.find((1, 0)).attributes == activity.attributes

    def test_children_sequence(self, example_manifest):
        children = project_root(example_manifest).children
        assert len(children) == 2
        assert children[-1].tag_name == "application"
        assert [c.tag_name for c in children[0:2]] == ["uses-sdk", "application"]
        with pytest.raises(IndexError):
            children[2]

    def test_lazy_construction(self, monkeypatch):
        calls = []
        real_partition = projector.partition

        def counting_partition(node):
            calls.append(node)
            return real_partition(node)

        monkeypatch.setattr(projector, "partition", counting_partition)

        root = project_root(RICH_MANIFEST)
        assert len(calls) == 1

        application = root.children[3]
        assert application.tag_name == "application"
        assert len(calls) == 2
        assert application.child_tags == ["activity", "activity", "meta-data"]
        assert len(calls) == 2

    def test_repeatable(self):
        assert project_root(RICH_MANIFEST).to_dict() == project_root(RICH_MANIFEST).to_dict()

    def test_project_any_node(self):
        node = project(RICH_MANIFEST["application"]["activities"][0], "activity", (4, 0))
        assert node.tag_name == "activity"
        assert node.child_tags == ["intent-filter"]
        assert node.children[0].path == (4, 0, 0)

    def test_project_rejects_non_objects(self):
        with pytest.raises(EmptyOrMissingRoot):
            project([{"name": ".A"}], "activity")
        with pytest.raises(EmptyOrMissingRoot):
            project_root(None)

    def test_suppressed_key_omitted(self):
        tags = [node.tag_name for node in walk(project_root(RICH_MANIFEST))]
        assert tags.count("activity") == 2
        for node in walk(project_root(RICH_MANIFEST)):
            assert all("launcher" not in name for name, _ in node.attributes)

    def test_attribute_values_unescaped(self):
        application = project_root(RICH_MANIFEST).children[3]
        assert ("android:label", "Example & Co") in application.attributes


class TestAgreement:
    """The tree and the XML document must describe the same elements."""

    @pytest.mark.parametrize("manifest", [
        RICH_MANIFEST,
        {"package": "p"},
        {"package": "p", "application": {}},
        {"package": "p", "usesSdk": "bad", "extra": {"x": 1}, "usesFeatures": [{"name": "f"}, 3]},
    ])
    def test_flattened_tags_match(self, manifest):
        assert flatten(project_root(manifest)) == flatten_serialized(serialize(manifest))

    def test_example_agreement(self, example_manifest):
        assert flatten(project_root(example_manifest)) == [
            ("manifest", ["xmlns:android", "package", "android:versionName"]),
            ("uses-sdk", ["android:minSdkVersion", "android:targetSdkVersion"]),
            ("application", ["android:label"]),
            ("activity", ["android:name", "android:exported"]),
        ]


class TestExpansionState:
    """Tests for presentation-side expand/collapse flags."""

    def test_defaults(self):
        state = ExpansionState()
        assert state.is_expanded(())
        assert not state.is_expanded((1,))

    def test_toggle(self):
        state = ExpansionState()
        assert state.toggle((1,)) is True
        assert state.is_expanded((1,))
        assert state.toggle((1,)) is False
        assert state.toggle(()) is False
        assert not state.is_expanded(())

    def test_expand_path_opens_ancestors(self):
        state = ExpansionState(root_expanded=False)
        state.expand_path((4, 0))
        assert state.is_expanded(())
        assert state.is_expanded((4,))
        assert state.is_expanded((4, 0))
        assert not state.is_expanded((4, 1))

    def test_expand_to_depth(self):
        root = project_root(RICH_MANIFEST)
        state = ExpansionState(root_expanded=False)
        state.expand_to_depth(root, 2)
        assert state.is_expanded(())
        assert state.is_expanded((3,))
        assert not state.is_expanded((3, 0))
        # leaves are never flagged
        assert not state.is_expanded((0,))

    def test_expand_to_depth_zero_collapses_root(self):
        root = project_root(RICH_MANIFEST)
        state = ExpansionState()
        state.expand_to_depth(root, 0)
        assert not state.is_expanded(())
        assert not state.is_expanded((3,))

    def test_expand_all_and_collapse(self):
        root = project_root(RICH_MANIFEST)
        state = ExpansionState()
        state.expand_all(root)
        assert state.is_expanded((3, 0, 0))
        state.collapse_all()
        assert not state.is_expanded(())
        state.reset()
        assert state.is_expanded(())

    def test_parse_path(self):
        assert ExpansionState.parse_path("") == ()
        assert ExpansionState.parse_path(None) == ()
        assert ExpansionState.parse_path("4.0.1") == (4, 0, 1)
        with pytest.raises(ValueError):
            ExpansionState.parse_path("4.x")
