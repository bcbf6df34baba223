from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .models import ScheduledSlice

# Characters per chart cell, including the closing "|".
CELL_WIDTH = 8

Cell = Tuple[Optional[int], int, int]


def chart_cells(slices: Sequence[ScheduledSlice]) -> List[Cell]:
    """
    Slices in time order as ``(pid, start, stop)``, with any idle span
    between them filled in as a ``None`` pid.
    """
    cells: List[Cell] = []
    clock = 0
    for sl in sorted(slices, key=lambda s: s.start_time):
        if sl.start_time > clock:
            cells.append((None, clock, sl.start_time))
        cells.append((sl.pid, sl.start_time, sl.end_time))
        clock = sl.end_time
    return cells


def gantt_row(cells: Sequence[Cell]) -> Text:
    row = Text("|")
    for pid, _, _ in cells:
        if pid is None:
            row.append("idle".center(CELL_WIDTH - 1), style="dim")
        else:
            row.append(str(pid).center(CELL_WIDTH - 1), style="bold")
        row.append("|")
    return row


def time_marks(cells: Sequence[Cell]) -> str:
    """Start of every cell, then the stop of the last one."""
    if not cells:
        return ""
    marks = "".join(str(start).ljust(CELL_WIDTH) for _, start, _ in cells)
    return marks + str(cells[-1][2])


def render_gantt(slices: Sequence[ScheduledSlice]) -> Panel:
    cells = chart_cells(slices)
    if not cells:
        return Panel("No execution", title="Gantt schedule", expand=False)
    return Panel(Group(gantt_row(cells), Text(time_marks(cells))), title="Gantt schedule", expand=False)
