"""Rojo project file models (*.project.json)."""

import json
import logging
import pathlib
import re
import typing

import pydantic

from rojomap.fs import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)

PROJECT_FILE_REGEX = re.compile(r"^.+\.project\.json$")
DEFAULT_PROJECT_NAME = "default.project.json"
LEGACY_PROJECT_NAME = "roblox-project.json"

# Metadata keys are prefixed; everything else in a node is a child name.
METADATA_PREFIX = "$"

class SchemaError(ValueError):
    """Raised when a project file does not match the project schema."""


class ProjectNotFoundError(FileNotFoundError):
    """Raised when a project file does not exist."""


def is_project_file(name: str) -> bool:
    return PROJECT_FILE_REGEX.match(name) is not None


class OptionalPath(pydantic.BaseModel):
    """`$path` form that tolerates a missing target."""

    model_config = pydantic.ConfigDict(extra="forbid", frozen=True)

    optional: str


class TreeProperty(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="allow", frozen=True)

    Type: str | None = None
    Value: typing.Any = None


class TreeNode(pydantic.BaseModel):
    """One node of a project tree."""

    model_config = pydantic.ConfigDict(extra="forbid", frozen=True)

    class_name: str | None = pydantic.Field(default=None, alias="$className")
    path: str | OptionalPath | None = pydantic.Field(default=None, alias="$path")
    properties: list[TreeProperty] | dict[str, typing.Any] | None = pydantic.Field(
        default=None, alias="$properties"
    )
    ignore_unknown_instances: bool | None = pydantic.Field(
        default=None, alias="$ignoreUnknownInstances"
    )
    children: dict[str, "TreeNode"] = pydantic.Field(default_factory=dict)

    @pydantic.model_validator(mode="before")
    @classmethod
    def _split_children(cls, data: typing.Any) -> typing.Any:
        if not isinstance(data, dict):
            return data
        metadata: dict[str, typing.Any] = {}
        children: dict[str, typing.Any] = {}
        for key, value in data.items():
            if key.startswith(METADATA_PREFIX):
                metadata[key] = value
            else:
                children[key] = value
        metadata["children"] = children
        return metadata

    @property
    def fs_path(self) -> str | None:
        """The bound path, whether required or optional."""
        if isinstance(self.path, OptionalPath):
            return self.path.optional
        return self.path

    @property
    def is_optional(self) -> bool:
        return isinstance(self.path, OptionalPath)


class ProjectFile(pydantic.BaseModel):
    """A validated project file."""

    model_config = pydantic.ConfigDict(extra="allow", frozen=True)

    name: str
    tree: TreeNode
    globIgnorePaths: list[str] | None = None
    servePort: int | None = None


def validate_project(data: typing.Any) -> ProjectFile:
    """Validate a decoded project document."""
    try:
        return ProjectFile.model_validate(data)
    except pydantic.ValidationError as e:
        raise SchemaError(str(e)) from e


def validate_tree(data: TreeNode | typing.Mapping[str, typing.Any]) -> TreeNode:
    if isinstance(data, TreeNode):
        return data
    try:
        return TreeNode.model_validate(data)
    except pydantic.ValidationError as e:
        raise SchemaError(str(e)) from e


def load_project_file(path: pathlib.Path, fs: FileSystem | None = None) -> ProjectFile:
    """Load and validate a project file.

    Raises ProjectNotFoundError if it is missing, SchemaError if it is not a
    valid project. Read errors on an existing file propagate.
    """
    fs = fs or LocalFileSystem()
    if not fs.exists(path):
        raise ProjectNotFoundError(f"Path does not exist: {path}")
    try:
        data = json.loads(fs.read_text(fs.real_path(path)))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise SchemaError(f"{path}: {e}") from e
    return validate_project(data)


class ProjectFileSearch(typing.NamedTuple):
    path: pathlib.Path | None
    warnings: list[str]


def find_project_file(
    project_dir: pathlib.Path, fs: FileSystem | None = None
) -> ProjectFileSearch:
    """Locate the project file for a directory.

    `default.project.json` wins. Otherwise `roblox-project.json` and any
    `*.project.json` are candidates and the first one is used.
    """
    fs = fs or LocalFileSystem()
    warnings: list[str] = []

    default_path = project_dir / DEFAULT_PROJECT_NAME
    if fs.exists(default_path):
        return ProjectFileSearch(default_path, warnings)

    candidates = [
        project_dir / name
        for name in fs.list_children(project_dir)
        if name != DEFAULT_PROJECT_NAME
        and (name == LEGACY_PROJECT_NAME or is_project_file(name))
    ]

    if len(candidates) > 1:
        ignored = ", ".join(str(c) for c in candidates[1:])
        message = (
            f"Multiple *.project.json files found, using {candidates[0]} "
            f"(ignored: {ignored})"
        )
        logger.warning(message)
        warnings.append(message)

    return ProjectFileSearch(candidates[0] if candidates else None, warnings)
