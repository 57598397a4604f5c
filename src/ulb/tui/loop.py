"""Progress UI loop: runs the state machine on its own thread.

Everything reaches the loop through one inbox queue: progress events from
the supervisor's pump, ticks from a timer thread, key presses from a key
reader thread, and the final Terminate. The loop handles one message at a
time and is the only writer of its state.
"""

import logging
import queue
import threading

from rich.console import Console
from rich.live import Live

from ..core.errors import UIRuntimeError
from .keys import KeyReader
from .state import Message, Terminate, Tick, KeyPress, UIState, reduce, render

logger = logging.getLogger(__name__)


class UILoop:
    """Threaded Rich Live renderer driven by reduce()."""

    def __init__(
        self,
        console: Console | None = None,
        *,
        tick_interval: float = 0.1,
        refresh_per_second: float = 12.0,
        read_keys: bool | None = None,
    ):
        self.console = console or Console()
        self._tick_interval = tick_interval
        self._refresh_per_second = refresh_per_second
        self._read_keys = KeyReader.available() if read_keys is None else read_keys
        self._inbox: queue.Queue[Message] = queue.Queue()
        self._helpers_stop = threading.Event()
        self._inbox_lock = threading.Lock()
        self._closed = False
        self._thread: threading.Thread | None = None
        # Written only by the loop thread; read by others after join()
        self.state = UIState()
        self.error: UIRuntimeError | None = None

    def send(self, message: Message) -> None:
        """Queue a message for the loop. Dropped once the loop has stopped."""
        with self._inbox_lock:
            if self._closed:
                return
            self._inbox.put(message)

    def terminate(self) -> None:
        """Ask the loop to stop, whatever it is currently showing."""
        self.send(Terminate())

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("UI loop already started")
        self._thread = threading.Thread(target=self._run, name="ulb-ui", daemon=True)
        self._thread.start()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        helpers: list[threading.Thread] = []
        try:
            with Live(
                render(self.state),
                console=self.console,
                refresh_per_second=self._refresh_per_second,
            ) as live:
                helpers = self._start_helpers()
                while True:
                    message = self._inbox.get()
                    state = reduce(self.state, message)
                    if state is not self.state:
                        self.state = state
                        live.update(render(state))
                    if state.terminated:
                        break
            logger.debug("UI loop stopped (%s)", self.state.stop_reason)
        except Exception as e:
            logger.exception("Progress UI crashed")
            self.error = UIRuntimeError(f"Progress UI crashed: {e}")
        finally:
            self._close_inbox()
            self._helpers_stop.set()
            for t in helpers:
                t.join(timeout=1)

    def _close_inbox(self) -> None:
        with self._inbox_lock:
            self._closed = True
        # Nothing reads the queue any more
        while True:
            try:
                self._inbox.get_nowait()
            except queue.Empty:
                break

    def _start_helpers(self) -> list[threading.Thread]:
        targets = [self._tick]
        if self._read_keys:
            targets.append(self._poll_keys)
        helpers = []
        for target in targets:
            t = threading.Thread(target=target, daemon=True)
            t.start()
            helpers.append(t)
        return helpers

    def _tick(self) -> None:
        while not self._helpers_stop.wait(self._tick_interval):
            self.send(Tick())

    def _poll_keys(self) -> None:
        try:
            reader = KeyReader()
        except (RuntimeError, OSError) as e:
            logger.debug("Key input disabled: %s", e)
            return
        try:
            while not self._helpers_stop.is_set():
                key = reader.read_key(timeout=0.1)
                if key is not None:
                    self.send(KeyPress(key))
        finally:
            reader.close()
