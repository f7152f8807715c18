"""Tests for Rojo project file (*.project.json) parsing and validation."""

import json
import pathlib

import pytest

from rojomap.manifest import (
    DEFAULT_PROJECT_NAME,
    OptionalPath,
    ProjectNotFoundError,
    SchemaError,
    TreeNode,
    find_project_file,
    is_project_file,
    load_project_file,
    validate_project,
    validate_tree,
)


class TestTreeNode:
    """Tests for TreeNode model."""

    def test_metadata_and_children(self) -> None:
        node = TreeNode.model_validate(
            {
                "$className": "DataModel",
                "$ignoreUnknownInstances": True,
                "ReplicatedStorage": {"$path": "src/shared"},
                "Workspace": {},
            }
        )
        assert node.class_name == "DataModel"
        assert node.ignore_unknown_instances is True
        assert list(node.children) == ["ReplicatedStorage", "Workspace"]
        assert node.children["ReplicatedStorage"].fs_path == "src/shared"

    def test_children_keep_declared_order(self) -> None:
        node = TreeNode.model_validate({"Zeta": {}, "Alpha": {}, "Mid": {}})
        assert list(node.children) == ["Zeta", "Alpha", "Mid"]

    def test_required_path(self) -> None:
        node = TreeNode.model_validate({"$path": "src"})
        assert node.fs_path == "src"
        assert not node.is_optional

    def test_optional_path(self) -> None:
        node = TreeNode.model_validate({"$path": {"optional": "maybe"}})
        assert node.path == OptionalPath(optional="maybe")
        assert node.fs_path == "maybe"
        assert node.is_optional

    def test_no_path(self) -> None:
        node = TreeNode.model_validate({"$className": "Folder"})
        assert node.fs_path is None
        assert node.children == {}

    def test_unknown_metadata_key_rejected(self) -> None:
        with pytest.raises(SchemaError):
            validate_tree({"$bogus": 1})

    def test_children_metadata_key_rejected(self) -> None:
        with pytest.raises(SchemaError):
            validate_tree({"$children": {"Sneaky": {}}})

    def test_child_named_children(self) -> None:
        node = validate_tree({"children": {"$className": "Folder"}})
        assert list(node.children) == ["children"]
        assert node.children["children"].class_name == "Folder"

    def test_child_must_be_object(self) -> None:
        with pytest.raises(SchemaError):
            validate_tree({"Child": "not a node"})

    def test_validate_tree_passes_nodes_through(self) -> None:
        node = TreeNode.model_validate({})
        assert validate_tree(node) is node


class TestProjectFile:
    """Tests for ProjectFile validation."""

    def test_minimal(self) -> None:
        project = validate_project({"name": "app", "tree": {}})
        assert project.name == "app"
        assert project.globIgnorePaths is None
        assert project.servePort is None

    def test_full(self) -> None:
        project = validate_project(
            {
                "name": "app",
                "servePort": 34872,
                "globIgnorePaths": ["**/*.spec.luau"],
                "tree": {"$className": "DataModel"},
                "emitLegacyScripts": False,
            }
        )
        assert project.servePort == 34872
        assert project.globIgnorePaths == ["**/*.spec.luau"]
        assert project.tree.class_name == "DataModel"

    def test_missing_name(self) -> None:
        with pytest.raises(SchemaError):
            validate_project({"tree": {}})

    def test_not_an_object(self) -> None:
        with pytest.raises(SchemaError):
            validate_project(["name", "tree"])


class TestLoadProjectFile:
    """Tests for loading project files from disk."""

    def test_load(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / DEFAULT_PROJECT_NAME
        path.write_text(json.dumps({"name": "app", "tree": {"$path": "src"}}))
        project = load_project_file(path)
        assert project.name == "app"
        assert project.tree.fs_path == "src"

    def test_missing(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(ProjectNotFoundError):
            load_project_file(tmp_path / DEFAULT_PROJECT_NAME)

    def test_invalid_utf8(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / DEFAULT_PROJECT_NAME
        path.write_bytes(b'{"name": "\xff", "tree": {}}')
        with pytest.raises(SchemaError):
            load_project_file(path)

    def test_invalid_json(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / DEFAULT_PROJECT_NAME
        path.write_text("{not json")
        with pytest.raises(SchemaError):
            load_project_file(path)


class TestFindProjectFile:
    """Tests for locating a directory's project file."""

    def test_default_wins(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / DEFAULT_PROJECT_NAME).write_text("{}")
        (tmp_path / "other.project.json").write_text("{}")
        result = find_project_file(tmp_path)
        assert result.path == tmp_path / DEFAULT_PROJECT_NAME
        assert result.warnings == []

    def test_single_candidate(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "game.project.json").write_text("{}")
        result = find_project_file(tmp_path)
        assert result.path == tmp_path / "game.project.json"
        assert result.warnings == []

    def test_legacy_name(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "roblox-project.json").write_text("{}")
        result = find_project_file(tmp_path)
        assert result.path == tmp_path / "roblox-project.json"

    def test_multiple_candidates_warn(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "b.project.json").write_text("{}")
        (tmp_path / "a.project.json").write_text("{}")
        result = find_project_file(tmp_path)
        assert result.path == tmp_path / "a.project.json"
        assert len(result.warnings) == 1
        assert "b.project.json" in result.warnings[0]

    def test_no_candidates(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "package.json").write_text("{}")
        result = find_project_file(tmp_path)
        assert result.path is None
        assert result.warnings == []


class TestIsProjectFile:

    def test_names(self) -> None:
        assert is_project_file("default.project.json")
        assert is_project_file("place.project.json")
        assert not is_project_file(".project.json")
        assert not is_project_file("project.json")
        assert not is_project_file("thing.json")
