"""Backend supervisor: runs the backend next to the progress UI.

Three threads per progress run:
  - the caller, blocked on the backend's exit
  - a pump reading the backend's stdout into ProgressEvents for the UI
  - the UI loop (tui.loop.UILoop)

The backend's exit status decides the Outcome. A user quit only stops the
UI; the backend is never signalled and is always waited for.
"""

import logging
import os
import subprocess
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, TextIO

from ..core.errors import BackendExitError, LaunchError
from ..core.events import read_events
from ..tui.loop import UILoop
from ..tui.state import UIState
from .invocation import BackendInvocation

logger = logging.getLogger(__name__)

STATUS_SUCCESS = "success"
STATUS_EXIT_CODE = "exit_code"
STATUS_LAUNCH_ERROR = "launch_error"

UI_NORMAL = "normal"
UI_ERROR = "error"

# How long the pump may keep reading after the backend exits. A grandchild
# that inherited the pipe can hold it open past that.
PUMP_JOIN_TIMEOUT = 5.0
_DRAIN_CHUNK = 65536


@dataclass(frozen=True)
class Outcome:
    """Combined result of one backend run."""
    backend_status: str  # "success" | "exit_code" | "launch_error"
    returncode: int | None = None
    error: str | None = None
    ui_status: str = UI_NORMAL  # "normal" | "error"
    ui_error: str | None = None
    ui_state: UIState | None = None  # last UI state, None if no UI ran

    @classmethod
    def launch_failed(cls, message: str) -> "Outcome":
        return cls(backend_status=STATUS_LAUNCH_ERROR, error=message)

    @classmethod
    def from_returncode(cls, returncode: int, **ui_fields) -> "Outcome":
        status = STATUS_SUCCESS if returncode == 0 else STATUS_EXIT_CODE
        return cls(backend_status=status, returncode=returncode, **ui_fields)

    @property
    def success(self) -> bool:
        return self.backend_status == STATUS_SUCCESS

    @property
    def exit_code(self) -> int:
        """Exit code for the CLI: 0 on success, never 0 on failure."""
        if self.success:
            return 0
        if self.returncode is not None and self.returncode > 0:
            return self.returncode
        return 1

    def raise_for_status(self) -> None:
        """Raise LaunchError or BackendExitError if the run failed."""
        if self.backend_status == STATUS_LAUNCH_ERROR:
            raise LaunchError(self.error or "Backend could not be started")
        if self.backend_status == STATUS_EXIT_CODE:
            raise BackendExitError(self.returncode)


def check_executable(path: Path) -> None:
    """Raise LaunchError unless path is an existing executable file."""
    path = Path(path)
    if not path.exists():
        raise LaunchError(f"Backend not found: {path} (run 'ulb update' to install it)")
    if not path.is_file():
        raise LaunchError(f"Backend is not a file: {path}")
    if not os.access(path, os.X_OK):
        raise LaunchError(f"Backend is not executable: {path}")


def run_passthrough(invocation: BackendInvocation) -> Outcome:
    """Run the backend with stdout and stderr going straight to ours."""
    try:
        check_executable(invocation.executable)
    except LaunchError as e:
        return Outcome.launch_failed(str(e))

    logger.debug("Running backend: %s (cwd=%s)", invocation.argv, invocation.working_dir)
    try:
        proc = subprocess.run(invocation.argv, cwd=invocation.working_dir)
    except OSError as e:
        return Outcome.launch_failed(f"Cannot start backend {invocation.executable}: {e}")
    return Outcome.from_returncode(proc.returncode)


class Supervisor:
    """Runs one backend invocation with a live progress UI."""

    def __init__(self, ui_factory: Callable[[], UILoop] | None = None):
        self._ui_factory = ui_factory or UILoop

    def run(self, invocation: BackendInvocation) -> Outcome:
        try:
            check_executable(invocation.executable)
        except LaunchError as e:
            return Outcome.launch_failed(str(e))

        # No backend is started unless its UI exists
        ui = self._ui_factory()

        logger.debug("Starting backend: %s (cwd=%s)", invocation.argv, invocation.working_dir)
        try:
            # stderr is inherited: backend diagnostics reach the user untouched
            proc = subprocess.Popen(
                invocation.argv,
                cwd=invocation.working_dir,
                stdout=subprocess.PIPE,
                text=True,
                bufsize=1,
                errors="replace",
            )
        except OSError as e:
            return Outcome.launch_failed(f"Cannot start backend {invocation.executable}: {e}")

        pump = threading.Thread(
            target=self._pump, args=(proc.stdout, ui), name="ulb-pump", daemon=True,
        )
        try:
            ui.start()
            pump.start()
            returncode = proc.wait()
        finally:
            if proc.poll() is None:
                # Interrupted while waiting; the backend got the same SIGINT
                proc.wait()
            self._finish_pump(pump, proc.stdout)
            ui.terminate()
            ui.join()

        logger.debug("Backend exited with %s", returncode)
        ui_fields = {"ui_state": ui.state}
        if ui.error is not None:
            ui_fields["ui_status"] = UI_ERROR
            ui_fields["ui_error"] = str(ui.error)
        return Outcome.from_returncode(returncode, **ui_fields)

    @staticmethod
    def _pump(stream: TextIO, ui: UILoop) -> None:
        """Feed events to the UI in pipe order, then drain what is left."""
        try:
            try:
                for event in read_events(stream):
                    ui.send(event)
            except Exception:
                logger.exception("Progress pump failed; discarding remaining backend output")
            # Past a bad line nothing is decoded, but the backend must never
            # block on a full pipe
            _drain(stream)
        finally:
            stream.close()

    @staticmethod
    def _finish_pump(pump: threading.Thread, stream: TextIO) -> None:
        if pump.ident is None:
            stream.close()
            return
        pump.join(PUMP_JOIN_TIMEOUT)
        if pump.is_alive():
            # The pump owns the stream and closes it when the pipe hits EOF
            logger.warning("Backend output still open after exit; not waiting for it")


def _drain(stream: TextIO) -> None:
    try:
        while stream.read(_DRAIN_CHUNK):
            pass
    except (OSError, ValueError) as e:
        logger.debug("Stopped draining backend output: %s", e)
