"""Host build system interfaces."""

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from persistql.core.entities.module_contribution import ModuleContribution
from persistql.core.interfaces.virtual_modules import IVirtualModuleStore


class IBuildModule(Protocol):
    """A module processed by the host build.

    ``graphql`` is set by loaders; ``source`` may be rewritten in place
    after the module has been bundled.
    """

    resource: str
    source: str
    graphql: ModuleContribution


class IBuild(Protocol):
    """One compilation run of the host build system."""

    @property
    def modules(self) -> Sequence[IBuildModule]:
        """Modules processed so far, in stable processing order."""
        ...

    @property
    def is_child(self) -> bool:
        """True for nested builds started from within another build."""
        ...

    def emit_asset(self, name: str, source: str) -> None:
        """Emit a named output artifact.

        Args:
            name: The artifact file name.
            source: The artifact contents.
        """
        ...


BuildCallback = Callable[[IBuild], None]
ResolveCallback = Callable[[IBuild, str], Awaitable[None]]


class IBuildHost(Protocol):
    """Contract for the build system a plugin is applied to.

    Hooks fire for every build, root or child; plugins check
    ``IBuild.is_child`` themselves.
    """

    @property
    def context(self) -> str:
        """Base directory that relative module names resolve against."""
        ...

    def mount_virtual_modules(self, store: IVirtualModuleStore) -> None:
        """Serve modules from an in-memory store during resolution.

        Args:
            store: The virtual module store to mount.
        """
        ...

    def on_build(self, callback: BuildCallback) -> None:
        """Register a callback run when a build starts."""
        ...

    def on_resolve(self, callback: ResolveCallback) -> None:
        """Register a callback run after a request resolves to a path.

        The module is not loaded until every resolve callback's awaitable
        completes, so a callback can defer resolution.
        """
        ...

    def on_seal(self, callback: BuildCallback) -> None:
        """Register a callback run once all modules are processed."""
        ...

    def on_after_compile(self, callback: BuildCallback) -> None:
        """Register a callback run after compilation, before output."""
        ...
