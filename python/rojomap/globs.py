"""Ignore globs scoped to the project file that declares them."""

import functools
import pathlib
import typing

import pathspec


@functools.lru_cache(maxsize=256)
def _compile(glob: str) -> pathspec.PathSpec:
    return pathspec.PathSpec.from_lines("gitwildmatch", [glob])


def glob_match(relative_path: pathlib.PurePath, glob: str) -> bool:
    """Match `glob` against every leading slice of `relative_path`.

    Rojo's matcher tests each ancestor as well as the path itself, so a glob
    naming a directory also excludes everything below it.
    """
    spec = _compile(glob)
    parts = relative_path.parts
    for i in range(1, len(parts) + 1):
        if spec.match_file("/".join(parts[:i])):
            return True
    return False


class IgnoreGlob(typing.NamedTuple):
    """A `globIgnorePaths` entry and the directory of its project file."""

    root: pathlib.Path
    glob: str

    def matches(self, path: pathlib.Path) -> bool:
        try:
            rel = path.relative_to(self.root)
        except ValueError:
            return False
        return glob_match(rel, self.glob)


def any_match(ignore_globs: typing.Iterable[IgnoreGlob], path: pathlib.Path) -> bool:
    return any(g.matches(path) for g in ignore_globs)
