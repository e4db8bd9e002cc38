"""Kubernetes operations for kritic."""

import json
import os
import subprocess
from pathlib import Path
from typing import Any

from kritic.errors import FetchError
from kritic.types import NodeInfo, OwnerReference, PodInfo


def default_kubeconfig() -> str | None:
    """Return ~/.kube/config if it exists, otherwise let kubectl decide.

    A KUBECONFIG environment variable always wins, so nothing is returned
    when it is set.
    """
    if os.environ.get("KUBECONFIG"):
        return None
    try:
        path = Path.home() / ".kube" / "config"
    except RuntimeError:
        # No resolvable home directory
        return None
    return str(path) if path.is_file() else None


# ===== Parsing =====


def parse_pod(item: dict[str, Any]) -> PodInfo:
    metadata = item.get("metadata", {})
    return PodInfo(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace", ""),
        node_name=item.get("spec", {}).get("nodeName", "") or "",
        phase=item.get("status", {}).get("phase", "Unknown"),
        owner_references=[
            OwnerReference(
                kind=ref.get("kind", ""),
                name=ref.get("name", ""),
                uid=ref.get("uid", ""),
            )
            for ref in metadata.get("ownerReferences") or []
        ],
    )


def parse_node(item: dict[str, Any]) -> NodeInfo:
    metadata = item.get("metadata", {})
    return NodeInfo(
        name=metadata.get("name", ""),
        labels=dict(metadata.get("labels") or {}),
    )


# ===== Cluster client =====


class KubectlClient:
    """Read-only access to the cluster through kubectl.

    Holds only connection options, so a single instance can be reused for
    every reporting pass.
    """

    def __init__(self, kubeconfig: str | None = None, context: str | None = None):
        self.kubeconfig = kubeconfig
        self.context = context

    def _base_command(self) -> list[str]:
        cmd = ["kubectl"]
        if self.kubeconfig:
            cmd.extend(["--kubeconfig", self.kubeconfig])
        if self.context:
            cmd.extend(["--context", self.context])
        return cmd

    def _get_items(self, resource: str, extra_args: list[str]) -> list[dict[str, Any]]:
        cmd = self._base_command() + ["get", resource, *extra_args, "-o", "json"]

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except FileNotFoundError as e:
            raise FetchError(resource, "kubectl executable not found") from e

        if result.returncode != 0:
            reason = result.stderr.strip() or f"kubectl exited with code {result.returncode}"
            raise FetchError(resource, reason)

        try:
            payload = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise FetchError(resource, f"invalid JSON from kubectl: {e}") from e

        return payload.get("items", [])

    def list_pods(self) -> list[PodInfo]:
        return [parse_pod(item) for item in self._get_items("pods", ["--all-namespaces"])]

    def list_nodes(self) -> list[NodeInfo]:
        return [parse_node(item) for item in self._get_items("nodes", [])]
