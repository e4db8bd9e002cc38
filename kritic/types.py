"""Type definitions for kritic."""

from dataclasses import dataclass, field
from enum import Enum


class TrackedKind(str, Enum):
    DAEMON_SET = "DaemonSet"
    REPLICA_SET = "ReplicaSet"
    JOB = "Job"

    @property
    def label(self) -> str:
        """Singular display label, e.g. ``daemonSet``."""
        return self.value[0].lower() + self.value[1:]

    @property
    def plural_label(self) -> str:
        return f"{self.label}s"


ALL_TRACKED_KINDS: tuple[TrackedKind, ...] = tuple(TrackedKind)


@dataclass
class OwnerReference:
    kind: str
    name: str = ""
    uid: str = ""


@dataclass
class PodInfo:
    name: str
    namespace: str
    node_name: str  # "" when the pod is not scheduled yet
    phase: str
    owner_references: list[OwnerReference] = field(default_factory=list)


@dataclass
class NodeInfo:
    name: str
    labels: dict[str, str] = field(default_factory=dict)

    def sorted_labels(self) -> list[tuple[str, str]]:
        return sorted(self.labels.items())


@dataclass
class NodeLabelFilter:
    key: str
    value: str


@dataclass
class NodeReport:
    node: NodeInfo
    groups: dict[TrackedKind, list[PodInfo]] = field(default_factory=dict)


@dataclass
class ClusterReport:
    total_pods: int
    total_nodes: int
    nodes: list[NodeReport] = field(default_factory=list)
