"""Polling loop for watch mode."""

import threading
from collections.abc import Callable

WATCH_INTERVAL_SECONDS = 5.0


def poll(
    run_pass: Callable[[], None],
    interval: float = WATCH_INTERVAL_SECONDS,
    stop_event: threading.Event | None = None,
) -> int:
    """Run ``run_pass`` repeatedly until ``stop_event`` is set.

    The wait between passes returns as soon as the event is set. Exceptions
    raised by a pass are not retried and end the loop.

    Returns the number of completed passes.
    """
    if stop_event is None:
        stop_event = threading.Event()

    passes = 0
    while not stop_event.is_set():
        run_pass()
        passes += 1
        if stop_event.wait(interval):
            break
    return passes
