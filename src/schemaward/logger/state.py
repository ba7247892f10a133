"""Process-wide logging state.

The root ``schemaward`` logger is configured once per process; this module
records whether that happened and owns the queue plumbing behind it.
"""

import queue
import threading
from dataclasses import dataclass, field
from logging.handlers import QueueListener


@dataclass
class LoggerState:
    """Root logger bookkeeping.

    Attributes:
        lock: Serializes root logger initialization
        root_initialized: Root handlers are installed
        config_applied: settings.conf levels have been applied
        queue_listener: Thread draining log_queue into the real handlers
        log_queue: Records waiting for the listener

    """

    lock: threading.Lock = field(default_factory=threading.Lock)
    root_initialized: bool = False
    config_applied: bool = False
    queue_listener: QueueListener | None = None
    log_queue: queue.Queue | None = None

    def stop_listener(self) -> None:
        """Stop the listener thread and forget the queue."""
        if self.queue_listener is not None:
            self.queue_listener.stop()
        self.queue_listener = None
        self.log_queue = None


_state = LoggerState()


def get_state() -> LoggerState:
    """Return the process-wide logger state."""
    return _state
