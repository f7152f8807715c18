"""Resolver table construction from project files."""

import logging
import pathlib
import typing

from rojomap.fs import DATA_EXTS, FileSystem, LocalFileSystem, convert_to_luau, normalize_path
from rojomap.globs import IgnoreGlob, any_match
from rojomap.manifest import (
    DEFAULT_PROJECT_NAME,
    ProjectNotFoundError,
    SchemaError,
    TreeNode,
    is_project_file,
    load_project_file,
)
from rojomap.rbxpath import RbxPath

logger = logging.getLogger(__name__)

DATA_MODEL_CLASS = "DataModel"


class Partition(typing.NamedTuple):
    """A file or directory that stands for a whole tree prefix."""

    fs_path: pathlib.Path
    rbx_path: RbxPath
    ignore_globs: tuple[IgnoreGlob, ...] = ()


class TableBuilder:
    """Walks project files and collects file mappings and partitions.

    The tree prefix is passed down as an immutable tuple, so every branch of
    the walk owns its own copy.
    """

    def __init__(self, fs: FileSystem | None = None) -> None:
        self.fs = fs or LocalFileSystem()
        self.file_map: dict[pathlib.Path, RbxPath] = {}
        # Most recently registered first.
        self.partitions: list[Partition] = []
        self.is_game = False
        self.warnings: list[str] = []

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def parse_config(
        self,
        project_path: pathlib.Path,
        prefix: RbxPath,
        *,
        root: bool = False,
    ) -> None:
        """Parse a project file.

        With `root`, the project's own name is not added to the prefix.
        """
        try:
            project = load_project_file(project_path, self.fs)
        except ProjectNotFoundError:
            self.warn(f'Path does not exist "{project_path}"')
            return
        except SchemaError as e:
            self.warn(f"Invalid configuration in {project_path}: {e}")
            return

        base_path = project_path.parent
        ignore_globs = tuple(
            IgnoreGlob(base_path, glob) for glob in project.globIgnorePaths or ()
        )
        self.parse_tree(
            base_path, project.name, project.tree, prefix,
            root=root, ignore_globs=ignore_globs,
        )

    def parse_tree(
        self,
        base_path: pathlib.Path,
        name: str,
        node: TreeNode,
        prefix: RbxPath = (),
        *,
        root: bool = False,
        ignore_globs: tuple[IgnoreGlob, ...] = (),
    ) -> None:
        if not root:
            prefix = prefix + (name,)

        if node.fs_path is not None:
            self.parse_path(
                normalize_path(base_path / node.fs_path),
                prefix,
                ignore_globs,
                optional=node.is_optional,
            )

        if node.class_name == DATA_MODEL_CLASS:
            self.is_game = True

        for child_name, child in node.children.items():
            self.parse_tree(
                base_path, child_name, child, prefix, ignore_globs=ignore_globs
            )

    def parse_path(
        self,
        item_path: pathlib.Path,
        prefix: RbxPath,
        ignore_globs: tuple[IgnoreGlob, ...] = (),
        *,
        optional: bool = False,
    ) -> None:
        """Classify a `$path` target and register it."""
        item_path = convert_to_luau(item_path)

        if any_match(ignore_globs, item_path):
            logger.debug("Ignoring %s", item_path)
            return

        exists = self.fs.exists(item_path)

        if is_project_file(item_path.name):
            if exists or not optional:
                self.parse_config(item_path, prefix, root=True)
            return

        if not exists and not optional:
            self.warn(f'Path does not exist "{item_path}"')

        if item_path.suffix in DATA_EXTS:
            logger.debug("Mapping %s -> %s", item_path, "/".join(prefix))
            self.file_map[item_path] = prefix
            return

        is_dir = exists and self.fs.is_dir(item_path)
        if is_dir:
            try:
                children = self.fs.list_children(item_path)
            except OSError as e:
                self.warn(f"Cannot read directory {item_path}: {e}")
                return
            if DEFAULT_PROJECT_NAME in children:
                self.parse_config(item_path / DEFAULT_PROJECT_NAME, prefix, root=True)
                return

        logger.debug("Partition %s -> %s", item_path, "/".join(prefix))
        self.partitions.insert(0, Partition(item_path, prefix, ignore_globs))

        if is_dir:
            self.search_directory(item_path, prefix, None, ignore_globs)

    def search_directory(
        self,
        directory: pathlib.Path,
        prefix: RbxPath,
        item: str | None = None,
        ignore_globs: tuple[IgnoreGlob, ...] = (),
    ) -> None:
        """Look for nested project files below a partition directory.

        `item` is the directory's own name, added to the prefix unless this
        is the partition root.
        """
        try:
            children = self.fs.list_children(directory)
        except OSError as e:
            self.warn(f"Cannot read directory {directory}: {e}")
            return

        if DEFAULT_PROJECT_NAME in children:
            # The project's name replaces the directory name at this level.
            self.parse_config(directory / DEFAULT_PROJECT_NAME, prefix)
            return

        if any_match(ignore_globs, directory):
            return

        if item is not None:
            prefix = prefix + (item,)

        for child in children:
            child_path = directory / child
            if (
                child != DEFAULT_PROJECT_NAME
                and is_project_file(child)
                and self.fs.is_file(child_path)
            ):
                self.parse_config(child_path, prefix)

        for child in children:
            child_path = directory / child
            if self.fs.is_dir(child_path):
                self.search_directory(child_path, prefix, child, ignore_globs)
