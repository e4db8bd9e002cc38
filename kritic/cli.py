import signal
import threading
from dataclasses import dataclass

import typer
from rich.console import Console

from kritic.errors import ConfigError, FetchError
from kritic.kubernetes import KubectlClient, default_kubeconfig
from kritic.operations import parse_node_label_filter, run_report_pass
from kritic.types import ALL_TRACKED_KINDS, NodeLabelFilter
from kritic.ui import (
    DisplayOptions,
    make_console,
    print_info,
    print_pass_separator,
    print_step,
    render_report,
)
from kritic.watch import WATCH_INTERVAL_SECONDS, poll

app = typer.Typer(add_completion=False)

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@dataclass
class ReportOptions:
    label_filter: NodeLabelFilter | None
    just_nodes: bool
    display: DisplayOptions


def _report_once(client: KubectlClient, options: ReportOptions) -> None:
    report = run_report_pass(
        client,
        label_filter=options.label_filter,
        tracked_kinds=ALL_TRACKED_KINDS,
        nodes_only=options.just_nodes,
    )
    render_report(report, options.display, make_console(options.display.no_color))


def _watch(client: KubectlClient, options: ReportOptions, console: Console) -> None:
    """Report every few seconds until SIGINT or SIGTERM sets the stop event."""
    stop_event = threading.Event()
    first_pass = True

    def run_pass() -> None:
        nonlocal first_pass
        if not first_pass:
            print_pass_separator(console)
        first_pass = False
        _report_once(client, options)

    def request_stop(signum, frame) -> None:
        stop_event.set()

    previous_handlers = {
        signum: signal.signal(signum, request_stop) for signum in _STOP_SIGNALS
    }
    try:
        poll(run_pass, interval=WATCH_INTERVAL_SECONDS, stop_event=stop_event)
    finally:
        for signum, handler in previous_handlers.items():
            signal.signal(signum, handler)

    print_info("Watch stopped.", console=console)


@app.command(help="Show the DaemonSet, ReplicaSet and Job pods running on each node.")
def report(
    kubeconfig: str = typer.Option(
        None,
        "--kubeconfig",
        envvar="KRITIC_KUBECONFIG",
        help="Path to the kubeconfig file. Defaults to $KUBECONFIG, then ~/.kube/config.",
    ),
    context: str = typer.Option(
        None, "--context", envvar="KRITIC_CONTEXT", help="The kubeconfig context to use."
    ),
    node_label: str = typer.Option(
        None,
        "--node-label",
        "-l",
        envvar="KRITIC_NODE_LABEL",
        help="Only inspect nodes whose label has this value (e.g. label=value).",
    ),
    just_nodes: bool = typer.Option(
        False, "--just-nodes", help="Only show information about nodes."
    ),
    show_node_labels: bool = typer.Option(
        False, "--show-node-labels", help="Show node labels."
    ),
    filter_node_labels: str = typer.Option(
        None,
        "--filter-node-labels",
        help="Only show the node label with this key (with --show-node-labels).",
    ),
    just_totals: bool = typer.Option(
        False, "--just-totals", help="Only show totals of each workload kind per node."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", envvar="KRITIC_NO_COLOR", help="Disable ANSI colors."
    ),
    watch: bool = typer.Option(
        False,
        "--watch",
        "-w",
        help=f"Loop and show the latest values every {WATCH_INTERVAL_SECONDS:g} seconds.",
    ),
):
    try:
        label_filter = parse_node_label_filter(node_label)
    except ConfigError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)

    options = ReportOptions(
        label_filter=label_filter,
        just_nodes=just_nodes,
        display=DisplayOptions(
            just_totals=just_totals,
            show_node_labels=show_node_labels,
            filter_node_labels=filter_node_labels,
            no_color=no_color,
        ),
    )
    console = make_console(no_color)
    client = KubectlClient(kubeconfig=kubeconfig or default_kubeconfig(), context=context)

    try:
        if watch:
            print_step(
                f"Watching the cluster every {WATCH_INTERVAL_SECONDS:g} seconds, press Ctrl+C to stop.",
                console=console,
            )
            _watch(client, options, console)
        else:
            _report_once(client, options)
    except FetchError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
