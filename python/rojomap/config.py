"""Resolver configuration: the container prefixes used for classification."""

import os

import pydantic

from rojomap.rbxpath import RbxPath

ENV_ISOLATED_CONTAINERS = "ROJOMAP_ISOLATED_CONTAINERS"

DEFAULT_ISOLATED_CONTAINERS: tuple[RbxPath, ...] = (
    ("StarterPack",),
    ("StarterGui",),
    ("StarterPlayer", "StarterPlayerScripts"),
    ("StarterPlayer", "StarterCharacterScripts"),
    ("StarterPlayer", "StarterCharacter"),
    ("PluginDebugService",),
)

DEFAULT_CLIENT_CONTAINERS: tuple[RbxPath, ...] = (
    ("StarterPack",),
    ("StarterGui",),
    ("StarterPlayer",),
)

DEFAULT_SERVER_CONTAINERS: tuple[RbxPath, ...] = (
    ("ServerStorage",),
    ("ServerScriptService",),
)


def parse_containers(raw: str) -> tuple[RbxPath, ...]:
    """Parse `A/B,C` into `(("A", "B"), ("C",))`."""
    containers = []
    for entry in raw.split(","):
        segments = tuple(s for s in entry.strip().split("/") if s)
        if segments:
            containers.append(segments)
    return tuple(containers)


class ResolverConfig(pydantic.BaseModel):
    """Container prefixes, checked in declared order."""

    model_config = pydantic.ConfigDict(extra="forbid", frozen=True)

    isolated_containers: tuple[RbxPath, ...] = DEFAULT_ISOLATED_CONTAINERS
    client_containers: tuple[RbxPath, ...] = DEFAULT_CLIENT_CONTAINERS
    server_containers: tuple[RbxPath, ...] = DEFAULT_SERVER_CONTAINERS

    @classmethod
    def from_env(cls) -> "ResolverConfig":
        """Defaults, with isolated containers overridable via
        `ROJOMAP_ISOLATED_CONTAINERS`."""
        env = os.environ.get(ENV_ISOLATED_CONTAINERS)
        if env:
            return cls(isolated_containers=parse_containers(env))
        return cls()
