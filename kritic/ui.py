import os
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape

from kritic.types import ClusterReport, NodeReport, PodInfo, TrackedKind

# Global console for UI functions
_console = Console(highlight=False, soft_wrap=True)

# (style for most pods, style for pods in a "quiet" phase, quiet phases)
_KIND_STYLES: dict[TrackedKind, tuple[str, str, tuple[str, ...]]] = {
    TrackedKind.DAEMON_SET: ("bright_yellow", "yellow", ("Pending",)),
    TrackedKind.REPLICA_SET: ("bright_green", "green", ("Pending",)),
    TrackedKind.JOB: ("bright_cyan", "cyan", ("Pending", "Succeeded")),
}


@dataclass
class DisplayOptions:
    just_totals: bool = False
    show_node_labels: bool = False
    filter_node_labels: str | None = None
    no_color: bool = False


def color_disabled(no_color: bool) -> bool:
    return no_color or bool(os.getenv("NO_COLOR"))


def make_console(no_color: bool = False) -> Console:
    if color_disabled(no_color):
        return Console(highlight=False, soft_wrap=True, no_color=True)
    return _console


def _styled(text: str, style: str, console: Console) -> str:
    if console.no_color:
        return escape(text)
    return f"[{style}]{escape(text)}[/{style}]"


def pod_style(kind: TrackedKind, pod: PodInfo) -> str:
    bright, dim, quiet_phases = _KIND_STYLES[kind]
    return dim if pod.phase in quiet_phases else bright


def render_node_labels(node_report: NodeReport, options: DisplayOptions, console: Console):
    for key, value in node_report.node.sorted_labels():
        if options.filter_node_labels and options.filter_node_labels != key:
            continue
        console.print(
            f"  label {_styled(key, 'bright_green', console)}={_styled(value, 'green', console)}"
        )


def render_kind_group(
    kind: TrackedKind, pods: list[PodInfo], options: DisplayOptions, console: Console
):
    if options.just_totals:
        bright, _, _ = _KIND_STYLES[kind]
        console.print(f"{kind.plural_label}: {_styled(str(len(pods)), bright, console)}")
        return

    for pod in pods:
        console.print(
            f"{kind.label}: {_styled(pod.name, pod_style(kind, pod), console)} ({escape(pod.phase)})"
        )


def render_report(
    report: ClusterReport,
    options: DisplayOptions | None = None,
    console: Console | None = None,
):
    if options is None:
        options = DisplayOptions()
    if console is None:
        console = make_console(options.no_color)

    console.print(f"There are {report.total_pods} pods in the cluster")
    console.print(f"There are {report.total_nodes} nodes in the cluster")

    for node_report in report.nodes:
        console.print(f"Node {_styled(node_report.node.name, 'bright_blue', console)}")

        if options.show_node_labels:
            render_node_labels(node_report, options, console)

        for kind, pods in node_report.groups.items():
            render_kind_group(kind, pods, options, console)


def print_pass_separator(console: Console | None = None):
    (console or _console).print()


def print_info(message: str, prefix: str = "ℹ️", console: Console | None = None):
    """Print an info message."""
    console = console or _console
    console.print(f"[blue]{prefix}[/blue]  {message}")


def print_step(message: str, prefix: str = "🔧", console: Console | None = None):
    """Print a step/progress message."""
    console = console or _console
    console.print(f"[cyan]{prefix}[/cyan] {message}")
