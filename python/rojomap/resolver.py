"""Resolve filesystem paths to Roblox tree paths."""

import collections.abc
import enum
import os
import pathlib
import typing

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from rojomap import rbxpath
from rojomap.builder import Partition, TableBuilder
from rojomap.config import ResolverConfig
from rojomap.fs import (
    CLIENT_SUBEXT,
    INIT_NAME,
    SCRIPT_EXTS,
    SERVER_SUBEXT,
    FileSystem,
    convert_to_luau,
    normalize_path,
    strip_rojo_exts,
)
from rojomap.globs import any_match
from rojomap.manifest import TreeNode, validate_tree
from rojomap.rbxpath import RbxPath, RelativeRbxPath


class RbxType(enum.Enum):
    ModuleScript = "ModuleScript"
    Script = "Script"
    LocalScript = "LocalScript"
    Unknown = "Unknown"


class FileRelation(enum.Enum):
    """How a requiring file and the required module sit relative to
    isolation containers."""

    OutToOut = "OutToOut"  # absolute
    OutToIn = "OutToIn"  # error
    InToOut = "InToOut"  # absolute
    InToIn = "InToIn"  # relative


class NetworkType(enum.Enum):
    Unknown = "Unknown"
    Client = "Client"
    Server = "Server"


SUB_EXT_TYPE_MAP: dict[str, RbxType] = {
    "": RbxType.ModuleScript,
    SERVER_SUBEXT: RbxType.Script,
    CLIENT_SUBEXT: RbxType.LocalScript,
}


def is_descendant(path: pathlib.Path, directory: pathlib.Path) -> bool:
    return path == directory or directory in path.parents


class Resolver:
    """Answers path queries for one resolved project.

    Build it with `from_path`, `from_tree` or `synthetic`. It is read-only
    afterwards.
    """

    __slots__ = ("_file_map", "_partitions", "_is_game", "_config", "_warnings")

    def __init__(
        self,
        file_map: collections.abc.Mapping[pathlib.Path, RbxPath],
        partitions: collections.abc.Iterable[Partition],
        *,
        is_game: bool = False,
        config: ResolverConfig | None = None,
        warnings: collections.abc.Iterable[str] = (),
    ) -> None:
        self._file_map = dict(file_map)
        self._partitions = tuple(partitions)
        self._is_game = is_game
        self._config = config or ResolverConfig()
        self._warnings = tuple(warnings)

    @classmethod
    def _from_builder(
        cls, builder: TableBuilder, config: ResolverConfig | None
    ) -> typing.Self:
        return cls(
            builder.file_map,
            builder.partitions,
            is_game=builder.is_game,
            config=config,
            warnings=builder.warnings,
        )

    @classmethod
    def from_path(
        cls,
        project_file: str | os.PathLike[str],
        *,
        config: ResolverConfig | None = None,
        fs: FileSystem | None = None,
    ) -> typing.Self:
        """Resolver for a `*.project.json` file."""
        builder = TableBuilder(fs)
        builder.parse_config(normalize_path(project_file), (), root=True)
        return cls._from_builder(builder, config)

    @classmethod
    def from_tree(
        cls,
        base_path: str | os.PathLike[str],
        tree: TreeNode | collections.abc.Mapping[str, typing.Any],
        *,
        config: ResolverConfig | None = None,
        fs: FileSystem | None = None,
    ) -> typing.Self:
        """Resolver for an already loaded tree rooted at `base_path`.

        Raises SchemaError if `tree` is a mapping that is not a valid node.
        """
        node = validate_tree(tree)
        builder = TableBuilder(fs)
        builder.parse_tree(normalize_path(base_path), "", node, root=True)
        return cls._from_builder(builder, config)

    @classmethod
    def synthetic(
        cls,
        base_path: str | os.PathLike[str],
        *,
        config: ResolverConfig | None = None,
        fs: FileSystem | None = None,
    ) -> typing.Self:
        """Resolver mapping `base_path` to the tree root.

        Used for packages without a project file; every file resolves
        relative to `base_path`.
        """
        base = normalize_path(base_path)
        return cls.from_tree(base, {"$path": str(base)}, config=config, fs=fs)

    @property
    def is_game(self) -> bool:
        """True if the project tree has a `DataModel` root."""
        return self._is_game

    @property
    def config(self) -> ResolverConfig:
        return self._config

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._warnings

    @property
    def partitions(self) -> tuple[Partition, ...]:
        """Partitions, most recently registered first."""
        return self._partitions

    @property
    def file_map(self) -> collections.abc.Mapping[pathlib.Path, RbxPath]:
        return self._file_map

    def get_rbx_path(self, file_path: str | os.PathLike[str]) -> RbxPath | None:
        """Tree path of a file, or None if nothing maps it."""
        path = convert_to_luau(normalize_path(file_path))

        mapped = self._file_map.get(path)
        if mapped is not None:
            return mapped

        is_script = path.suffix in SCRIPT_EXTS
        for partition in self._partitions:
            if not is_descendant(path, partition.fs_path):
                continue
            if any_match(partition.ignore_globs, path):
                continue

            parts = list(path.relative_to(partition.fs_path).parts)
            if parts:
                parts[-1] = strip_rojo_exts(parts[-1])
                if is_script and parts[-1] == INIT_NAME:
                    parts.pop()
            return partition.rbx_path + tuple(parts)

        return None

    def get_rbx_type(self, file_path: str | os.PathLike[str]) -> RbxType:
        path = convert_to_luau(pathlib.PurePath(file_path))
        if path.suffix in SCRIPT_EXTS:
            subext = pathlib.PurePath(path.stem).suffix
            return SUB_EXT_TYPE_MAP.get(subext, RbxType.Unknown)
        # Non-script extensions cannot use .server, .client, etc.
        return RbxType.ModuleScript

    def get_container(
        self,
        containers: collections.abc.Iterable[RbxPath],
        rbx_path: RbxPath | None,
    ) -> RbxPath | None:
        """First container `rbx_path` falls in. Always None outside a game."""
        if not self._is_game or rbx_path is None:
            return None
        for container in containers:
            if rbxpath.starts_with(rbx_path, container):
                return container
        return None

    def get_file_relation(
        self, file_rbx_path: RbxPath, module_rbx_path: RbxPath
    ) -> FileRelation:
        containers = self._config.isolated_containers
        file_container = self.get_container(containers, file_rbx_path)
        module_container = self.get_container(containers, module_rbx_path)
        if file_container is not None and module_container is not None:
            if file_container == module_container:
                return FileRelation.InToIn
            return FileRelation.OutToIn
        if file_container is not None:
            return FileRelation.InToOut
        if module_container is not None:
            return FileRelation.OutToIn
        return FileRelation.OutToOut

    def is_isolated(self, rbx_path: RbxPath) -> bool:
        return self.get_container(self._config.isolated_containers, rbx_path) is not None

    def get_network_type(self, rbx_path: RbxPath) -> NetworkType:
        if self.get_container(self._config.server_containers, rbx_path) is not None:
            return NetworkType.Server
        if self.get_container(self._config.client_containers, rbx_path) is not None:
            return NetworkType.Client
        return NetworkType.Unknown

    @staticmethod
    def relative(rbx_from: RbxPath, rbx_to: RbxPath) -> RelativeRbxPath:
        return rbxpath.relative(rbx_from, rbx_to)


def print_tree(resolver: Resolver, console: Console | None = None) -> None:
    """Print file mappings and partitions as a tree."""
    console = console or Console()
    tree = Tree("[bold blue]game[/]" if resolver.is_game else "[bold blue]root[/]")
    nodes: dict[RbxPath, Tree] = {(): tree}

    def _ensure(rbx_path: RbxPath) -> Tree:
        if rbx_path in nodes:
            return nodes[rbx_path]
        node = _ensure(rbx_path[:-1]).add(f"[bold cyan]{escape(rbx_path[-1])}[/]")
        nodes[rbx_path] = node
        return node

    entries = [(rbx, path, False) for path, rbx in resolver.file_map.items()]
    entries += [(p.rbx_path, p.fs_path, True) for p in resolver.partitions]
    for rbx, path, is_partition in sorted(entries, key=lambda e: e[0]):
        kind = "partition" if is_partition else "file"
        _ensure(rbx).add(f"[dim]{kind} → {escape(str(path))}[/]")

    console.print(tree)
    for warning in resolver.warnings:
        console.print(f"[yellow]warning:[/] {escape(warning)}")
