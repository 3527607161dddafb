from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ListeningSocket:
    pid: int
    port: int
    process_name: str = ""


@dataclass(frozen=True)
class Classification:
    is_match: bool
    command: str


@dataclass(frozen=True)
class ServerProcess:
    pid: int
    port: int
    command: str


@dataclass(frozen=True)
class ProjectInfo:
    name: Optional[str] = None
    version: Optional[str] = None
    repository: Optional[str] = None


@dataclass(frozen=True)
class ResolvedProject:
    cwd: Optional[str] = None
    project_info: Optional[ProjectInfo] = None


@dataclass(frozen=True)
class ResourceUsage:
    memory_mb: Optional[int] = None
    cpu_percent: Optional[float] = None


@dataclass(frozen=True)
class ResolvedDetails:
    cwd: Optional[str] = None
    project_info: Optional[ProjectInfo] = None
    memory_mb: Optional[int] = None
    cpu_percent: Optional[float] = None

    @classmethod
    def combine(cls, project: ResolvedProject, usage: ResourceUsage) -> "ResolvedDetails":
        return cls(
            cwd=project.cwd,
            project_info=project.project_info,
            memory_mb=usage.memory_mb,
            cpu_percent=usage.cpu_percent,
        )

    @property
    def project_name(self) -> Optional[str]:
        if self.project_info is None:
            return None
        return self.project_info.name


@dataclass
class ServerEntry:
    port: int
    title: str
    pids: List[int] = field(default_factory=list)
    version: Optional[str] = None
    memory: Optional[str] = None
    cpu: Optional[str] = None
    repository: Optional[str] = None
    cwd: Optional[str] = None


__all__ = [
    "Classification",
    "ListeningSocket",
    "ProjectInfo",
    "ResolvedDetails",
    "ResolvedProject",
    "ResourceUsage",
    "ServerEntry",
    "ServerProcess",
]
