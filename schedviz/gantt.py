from __future__ import annotations

from typing import Dict, List, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ExecutionInterval

COLORS = ["blue", "red", "green", "yellow", "magenta", "cyan", "bright_blue", "bright_red"]


def _time_marks(intervals: Sequence[ExecutionInterval], offset: int = 0) -> str:
    """
    Place each slice boundary under its column; marks that would collide
    with the previous one are dropped.
    """
    boundaries = sorted({0} | {sl.start_time for sl in intervals} | {sl.end_time for sl in intervals})
    marks = ""
    for t in boundaries:
        col = t + offset
        label = str(t)
        if len(marks) > col or (marks and len(marks) == col and not marks.endswith(" ")):
            continue
        marks = marks.ljust(col) + label
    return marks


def render_gantt(intervals: Sequence[ExecutionInterval]) -> str:
    """
    Plain-text Gantt chart, one character per time unit. Idle gaps are dots.
    """
    if not intervals:
        return "(no execution)"

    intervals = sorted(intervals, key=lambda s: (s.start_time, s.end_time))

    line = "|"
    labels = " "
    last_time = 0

    for sl in intervals:
        idle_gap = sl.start_time - last_time
        if idle_gap > 0:
            line += "." * idle_gap
            labels += " " * idle_gap

        width = sl.duration
        line += "=" * width
        labels += sl.pid[:width].ljust(width)
        last_time = sl.end_time

    line += "|"

    return "\n".join(
        [
            "Gantt Chart:",
            line,
            labels.rstrip(),
            _time_marks(intervals),
        ]
    )


def build_rich_gantt(intervals: Sequence[ExecutionInterval]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.
    """
    if not intervals:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    intervals = sorted(intervals, key=lambda s: (s.start_time, s.end_time))

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    last_time = 0

    for sl in intervals:
        idle_gap = sl.start_time - last_time
        if idle_gap > 0:
            timeline.append(" " * idle_gap)
            labels.append(" " * idle_gap)

        width = sl.duration
        timeline.append(" " * width, style=f"on {pid_color(sl.pid)}")
        labels.append(sl.pid[:width].ljust(width), style="bold")
        last_time = sl.end_time

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    panel = Panel.fit(table, title="Gantt Chart")
    # Panel.fit adds a border and one column of padding on each side.
    return panel, _time_marks(intervals, offset=2)


def legend(intervals: Sequence[ExecutionInterval]) -> List[Text]:
    """Color swatch plus pid for each process, in order of first execution."""
    seen: List[str] = []
    for sl in sorted(intervals, key=lambda s: s.start_time):
        if sl.pid not in seen:
            seen.append(sl.pid)
    return [Text.assemble(("  ", f"on {COLORS[i % len(COLORS)]}"), f" {pid}") for i, pid in enumerate(seen)]
