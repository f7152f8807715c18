"""rojomap - resolve source files to Roblox tree paths via Rojo project files."""

from rojomap.builder import Partition
from rojomap.config import ResolverConfig
from rojomap.globs import IgnoreGlob
from rojomap.manifest import (
    ProjectFile,
    ProjectNotFoundError,
    SchemaError,
    TreeNode,
    find_project_file,
)
from rojomap.rbxpath import PARENT, RbxPath, RelativeRbxPath
from rojomap.resolver import FileRelation, NetworkType, RbxType, Resolver, print_tree

__all__ = [
    "PARENT",
    "FileRelation",
    "IgnoreGlob",
    "NetworkType",
    "Partition",
    "ProjectFile",
    "ProjectNotFoundError",
    "RbxPath",
    "RbxType",
    "RelativeRbxPath",
    "Resolver",
    "ResolverConfig",
    "SchemaError",
    "TreeNode",
    "find_project_file",
    "print_tree",
]
