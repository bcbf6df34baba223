from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping, Sequence

from .models import InvalidWorkloadError, Process

logger = logging.getLogger(__name__)

# Column order of headerless CSV rows: id, burst, arrival[, priority]
POSITIONAL_FIELDS = ("pid", "burst_time", "arrival_time", "priority")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix in {".csv", ".txt"}:
        processes = _load_csv(path)
    else:
        raise InvalidWorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.debug("Loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidWorkloadError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise InvalidWorkloadError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        rows = [row for row in csv.reader(f) if any(cell.strip() for cell in row)]

    if not rows:
        return []

    header = [h.strip() for h in rows[0]]
    if "pid" not in header:
        return [_process_from_row(row) for row in rows]

    return [_process_from_mapping(dict(zip(header, row))) for row in rows[1:]]


def _process_from_row(row: Sequence[str]) -> Process:
    if len(row) < 3 or len(row) > 4:
        raise InvalidWorkloadError(f"Invalid process entry: {row!r} (expected id,burst,arrival[,priority])")
    return _process_from_mapping(dict(zip(POSITIONAL_FIELDS, row)))


def _process_from_mapping(mapping: Mapping) -> Process:
    try:
        pid = int(mapping["pid"])
        arrival_time = int(mapping["arrival_time"])
        burst_time = int(mapping["burst_time"])
        priority_val = mapping.get("priority")
        priority = int(priority_val) if priority_val not in (None, "") else 0
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise InvalidWorkloadError(f"Invalid process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
