"""Classification and aggregation operations for kritic."""

from collections.abc import Iterable, Sequence
from typing import Protocol

from kritic.errors import ConfigError
from kritic.types import (
    ALL_TRACKED_KINDS,
    ClusterReport,
    NodeInfo,
    NodeLabelFilter,
    NodeReport,
    PodInfo,
    TrackedKind,
)


class ClusterClient(Protocol):
    def list_pods(self) -> list[PodInfo]: ...

    def list_nodes(self) -> list[NodeInfo]: ...


# ===== Owner classification =====


def classify(node: NodeInfo, pods: Iterable[PodInfo], kind: TrackedKind | str) -> list[PodInfo]:
    """Return the pods scheduled on ``node`` whose first owner is of ``kind``.

    Only the first owner reference decides the grouping. Input order is kept.
    """
    kind_name = kind.value if isinstance(kind, TrackedKind) else kind
    return [
        pod
        for pod in pods
        if pod.node_name == node.name
        and pod.owner_references
        and pod.owner_references[0].kind == kind_name
    ]


# ===== Node label filter =====


def parse_node_label_filter(expression: str | None) -> NodeLabelFilter | None:
    if not expression:
        return None

    key, sep, value = expression.partition("=")
    if not sep:
        raise ConfigError(
            f"Invalid node label filter '{expression}': expected the form key=value."
        )
    if not key:
        raise ConfigError(
            f"Invalid node label filter '{expression}': the label key is empty."
        )
    return NodeLabelFilter(key=key, value=value)


def node_matches_filter(node: NodeInfo, label_filter: NodeLabelFilter | None) -> bool:
    """Only a node that carries the key with a different value is rejected.

    Nodes without the label at all are kept.
    """
    if label_filter is None:
        return True
    if label_filter.key not in node.labels:
        return True
    return node.labels[label_filter.key] == label_filter.value


def filter_nodes(
    nodes: Iterable[NodeInfo], label_filter: NodeLabelFilter | None
) -> list[NodeInfo]:
    return [node for node in nodes if node_matches_filter(node, label_filter)]


# ===== Reporting =====


def build_report(
    pods: Sequence[PodInfo],
    nodes: Sequence[NodeInfo],
    label_filter: NodeLabelFilter | None = None,
    tracked_kinds: Sequence[TrackedKind] = ALL_TRACKED_KINDS,
    nodes_only: bool = False,
) -> ClusterReport:
    node_reports: list[NodeReport] = []
    for node in filter_nodes(nodes, label_filter):
        if nodes_only:
            node_reports.append(NodeReport(node=node))
            continue

        groups = {kind: classify(node, pods, kind) for kind in tracked_kinds}
        node_reports.append(NodeReport(node=node, groups=groups))

    return ClusterReport(
        total_pods=len(pods),
        total_nodes=len(nodes),
        nodes=node_reports,
    )


def run_report_pass(
    client: ClusterClient,
    label_filter: NodeLabelFilter | None = None,
    tracked_kinds: Sequence[TrackedKind] = ALL_TRACKED_KINDS,
    nodes_only: bool = False,
) -> ClusterReport:
    """Fetch a fresh snapshot of pods and nodes and aggregate it.

    Raises:
        FetchError: If listing pods or nodes fails.
    """
    pods = client.list_pods()
    nodes = client.list_nodes()
    return build_report(
        pods,
        nodes,
        label_filter=label_filter,
        tracked_kinds=tracked_kinds,
        nodes_only=nodes_only,
    )
