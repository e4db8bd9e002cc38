import io

from rich.console import Console

from kritic.types import (
    ClusterReport,
    NodeInfo,
    NodeReport,
    OwnerReference,
    PodInfo,
    TrackedKind,
)
from kritic.ui import (
    DisplayOptions,
    color_disabled,
    pod_style,
    print_info,
    print_step,
    render_report,
)


def make_pod(name: str, kind: str, phase: str = "Running") -> PodInfo:
    return PodInfo(name, "default", "n1", phase, [OwnerReference(kind, "owner")])


def sample_report() -> ClusterReport:
    node = NodeInfo("n1", {"zone": "a", "arch": "amd64"})
    return ClusterReport(
        total_pods=4,
        total_nodes=2,
        nodes=[
            NodeReport(
                node=node,
                groups={
                    TrackedKind.DAEMON_SET: [make_pod("fluentd-x", "DaemonSet")],
                    TrackedKind.REPLICA_SET: [
                        make_pod("web-1", "ReplicaSet"),
                        make_pod("web-2", "ReplicaSet", phase="Pending"),
                    ],
                    TrackedKind.JOB: [],
                },
            )
        ],
    )


def render(report: ClusterReport, **options) -> str:
    buffer = io.StringIO()
    console = Console(file=buffer, no_color=True, highlight=False, soft_wrap=True)
    render_report(report, DisplayOptions(no_color=True, **options), console)
    return buffer.getvalue()


class TestRenderReport:
    """Tests for render_report function."""

    def test_lists_pods_per_kind(self):
        """Test that each pod is printed under its kind with its phase."""
        output = render(sample_report())

        assert output.splitlines() == [
            "There are 4 pods in the cluster",
            "There are 2 nodes in the cluster",
            "Node n1",
            "daemonSet: fluentd-x (Running)",
            "replicaSet: web-1 (Running)",
            "replicaSet: web-2 (Pending)",
        ]

    def test_just_totals(self):
        """Test that only per-kind counts are printed."""
        output = render(sample_report(), just_totals=True)

        assert output.splitlines()[3:] == [
            "daemonSets: 1",
            "replicaSets: 2",
            "jobs: 0",
        ]

    def test_node_labels_are_sorted(self):
        """Test that node labels are printed sorted by key."""
        output = render(sample_report(), show_node_labels=True)

        assert output.splitlines()[3:5] == ["  label arch=amd64", "  label zone=a"]

    def test_node_labels_restricted_to_key(self):
        """Test that only the requested label key is printed."""
        output = render(
            sample_report(), show_node_labels=True, filter_node_labels="zone"
        )

        assert "  label zone=a" in output
        assert "arch" not in output

    def test_nodes_only_report_prints_no_groups(self):
        """Test that a node without groups prints just its name."""
        report = ClusterReport(1, 1, [NodeReport(node=NodeInfo("n1"))])

        assert render(report).splitlines()[2:] == ["Node n1"]

    def test_names_with_markup_are_printed_verbatim(self):
        """Test that square brackets in pod names are not treated as markup."""
        report = ClusterReport(
            1,
            1,
            [
                NodeReport(
                    node=NodeInfo("n1"),
                    groups={TrackedKind.JOB: [make_pod("odd[bold]", "Job")]},
                )
            ],
        )

        assert "job: odd[bold] (Running)" in render(report)


class TestStatusMessages:
    """Tests for print_info and print_step."""

    def test_messages_use_given_console(self):
        """Test that status messages go to the console passed in, without color."""
        buffer = io.StringIO()
        console = Console(
            file=buffer, force_terminal=True, no_color=True, highlight=False, soft_wrap=True
        )

        print_step("Watching the cluster", console=console)
        print_info("Watch stopped.", console=console)

        output = buffer.getvalue()
        assert "Watching the cluster" in output
        assert "Watch stopped." in output
        assert "\x1b[" not in output


class TestStyles:
    """Tests for pod styling rules."""

    def test_pending_pods_use_dim_style(self):
        """Test that pending DaemonSet pods use the dim color."""
        assert pod_style(TrackedKind.DAEMON_SET, make_pod("p", "DaemonSet", "Pending")) == "yellow"
        assert pod_style(TrackedKind.DAEMON_SET, make_pod("p", "DaemonSet")) == "bright_yellow"

    def test_succeeded_jobs_use_dim_style(self):
        """Test that Succeeded is a dim phase for jobs only."""
        assert pod_style(TrackedKind.JOB, make_pod("p", "Job", "Succeeded")) == "cyan"
        assert pod_style(TrackedKind.REPLICA_SET, make_pod("p", "ReplicaSet", "Succeeded")) == "bright_green"

    def test_no_color_env_disables_color(self, monkeypatch):
        """Test that NO_COLOR disables colors."""
        monkeypatch.setenv("NO_COLOR", "1")

        assert color_disabled(False)

    def test_color_enabled_by_default(self, monkeypatch):
        """Test that colors are on unless disabled."""
        monkeypatch.delenv("NO_COLOR", raising=False)

        assert not color_disabled(False)
        assert color_disabled(True)
