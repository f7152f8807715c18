"""Filesystem access used while building a resolver."""

import os
import pathlib
import typing

LUA_EXT = ".lua"
LUAU_EXT = ".luau"
JSON_EXT = ".json"
TOML_EXT = ".toml"

SCRIPT_EXTS = frozenset({LUAU_EXT})
DATA_EXTS = frozenset({JSON_EXT, TOML_EXT})
MODULE_EXTS = SCRIPT_EXTS | DATA_EXTS

INIT_NAME = "init"
SERVER_SUBEXT = ".server"
CLIENT_SUBEXT = ".client"


def normalize_path(path: str | os.PathLike[str]) -> pathlib.Path:
    """Absolute, lexically normalized path. Symlinks are left alone."""
    return pathlib.Path(os.path.normpath(os.path.abspath(os.fspath(path))))


def convert_to_luau(path: pathlib.Path) -> pathlib.Path:
    """Rewrite the legacy `.lua` extension to `.luau`."""
    if path.suffix == LUA_EXT:
        return path.with_suffix(LUAU_EXT)
    return path


def strip_rojo_exts(name: str) -> str:
    """Drop a module extension and, for scripts, a `.server`/`.client` subextension."""
    stem, ext = os.path.splitext(name)
    if ext not in MODULE_EXTS:
        return name
    if ext in SCRIPT_EXTS:
        base, subext = os.path.splitext(stem)
        if subext in (SERVER_SUBEXT, CLIENT_SUBEXT):
            return base
    return stem


class FileSystem(typing.Protocol):
    """The filesystem operations the builder needs."""

    def exists(self, path: pathlib.Path) -> bool: ...

    def is_dir(self, path: pathlib.Path) -> bool: ...

    def is_file(self, path: pathlib.Path) -> bool: ...

    def list_children(self, path: pathlib.Path) -> list[str]: ...

    def real_path(self, path: pathlib.Path) -> pathlib.Path: ...

    def read_text(self, path: pathlib.Path) -> str: ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def exists(self, path: pathlib.Path) -> bool:
        return path.exists()

    def is_dir(self, path: pathlib.Path) -> bool:
        return path.is_dir()

    def is_file(self, path: pathlib.Path) -> bool:
        return path.is_file()

    def list_children(self, path: pathlib.Path) -> list[str]:
        # Sorted so discovery order does not depend on the OS.
        return sorted(item.name for item in path.iterdir())

    def real_path(self, path: pathlib.Path) -> pathlib.Path:
        return path.resolve(strict=True)

    def read_text(self, path: pathlib.Path) -> str:
        return path.read_text(encoding="utf-8")
