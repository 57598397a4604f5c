"""Progress UI model: messages, a pure reducer, and a pure render function.

The UI loop (tui.loop) feeds messages through reduce() one at a time and
hands render() output to Rich. Nothing here touches the terminal, so the
whole state machine is testable without one.
"""

import math
from dataclasses import dataclass, replace

from rich.console import Group
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from ..core.constants import QUIT_KEY
from ..core.events import ProgressEvent

BAR_WIDTH = 40
# Fraction of the remaining gap the displayed bar closes per tick
EASING = 0.35
# Snap to target once closer than this
SNAP = 0.002
SPINNER = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

STOP_QUIT = "quit"
STOP_TERMINATED = "terminated"


@dataclass(frozen=True)
class Tick:
    """Animation tick."""


@dataclass(frozen=True)
class KeyPress:
    key: str


@dataclass(frozen=True)
class Terminate:
    """Injected by the supervisor once the backend has exited."""


Message = ProgressEvent | Tick | KeyPress | Terminate


@dataclass(frozen=True)
class UIState:
    stage: str = ""
    progress: float = 0.0  # as received, not clamped
    frame: int = 0
    shown_progress: float = 0.0  # animated, always in [0, 1]
    terminated: bool = False
    stop_reason: str = ""


def clamp_progress(value: float) -> float:
    """Clamp a raw progress value into [0, 1] for display (NaN -> 0)."""
    if math.isnan(value):
        return 0.0
    return min(max(value, 0.0), 1.0)


def reduce(state: UIState, message: Message) -> UIState:
    """Return the state after handling one message."""
    if state.terminated:
        return state

    if isinstance(message, ProgressEvent):
        return replace(state, stage=message.stage, progress=message.progress)

    if isinstance(message, Terminate):
        return _stop(state, STOP_TERMINATED)

    if isinstance(message, KeyPress):
        if message.key == QUIT_KEY:
            return _stop(state, STOP_QUIT)
        return state

    if isinstance(message, Tick):
        return replace(
            state,
            frame=state.frame + 1,
            shown_progress=_ease(state.shown_progress, clamp_progress(state.progress)),
        )

    return state


def _stop(state: UIState, reason: str) -> UIState:
    # Final frame shows the bar at its real position, not mid-animation
    return replace(
        state,
        terminated=True,
        stop_reason=reason,
        shown_progress=clamp_progress(state.progress),
    )


def _ease(shown: float, target: float) -> float:
    step = shown + (target - shown) * EASING
    if abs(target - step) < SNAP:
        return target
    return step


def render(state: UIState):
    """Build the Rich renderable for a state: stage label and bar."""
    if state.stage:
        label = Text.assemble(("Stage: ", "bold"), (state.stage, "cyan"))
    else:
        label = Text("Waiting for backend...", style="dim")

    if not state.terminated:
        spinner = SPINNER[state.frame % len(SPINNER)]
        label = Text.assemble((f"{spinner} ", "green"), label)

    bar = ProgressBar(
        total=1.0,
        completed=state.shown_progress,
        width=BAR_WIDTH,
    )
    row = Table.grid(padding=(0, 1))
    row.add_column()
    row.add_column(justify="right", width=5)
    row.add_row(bar, Text(f"{clamp_progress(state.progress) * 100:.0f}%"))

    return Group(label, row)
