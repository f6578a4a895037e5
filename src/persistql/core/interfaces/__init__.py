"""Core interfaces (Protocol classes) for persistql."""

from persistql.core.interfaces.build_host import (
    BuildCallback,
    IBuild,
    IBuildHost,
    IBuildModule,
    ResolveCallback,
)
from persistql.core.interfaces.listener import IQueryMapListener
from persistql.core.interfaces.serializer import IQueryMapSerializer
from persistql.core.interfaces.virtual_modules import IVirtualModuleStore

__all__ = [
    "IBuild",
    "IBuildHost",
    "IBuildModule",
    "BuildCallback",
    "ResolveCallback",
    "IQueryMapListener",
    "IQueryMapSerializer",
    "IVirtualModuleStore",
]
