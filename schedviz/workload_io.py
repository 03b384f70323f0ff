from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import List, Mapping

from .errors import InvalidInput
from .models import ProcessDescriptor

# Accepted spellings for each field, first match wins.
_FIELD_ALIASES = {
    "pid": ("pid", "id"),
    "arrival_time": ("arrival_time", "arrival"),
    "burst_time": ("burst_time", "burst"),
}


def sample_workload() -> List[ProcessDescriptor]:
    """
    The four-process demo set used when no workload file is given.
    """
    return [
        ProcessDescriptor("P1", arrival_time=0, burst_time=5, priority=2),
        ProcessDescriptor("P2", arrival_time=1, burst_time=3, priority=1),
        ProcessDescriptor("P3", arrival_time=2, burst_time=8, priority=3),
        ProcessDescriptor("P4", arrival_time=3, burst_time=6, priority=4),
    ]


def load_workload(path: str | Path) -> List[ProcessDescriptor]:
    """
    Load a workload from a JSON or CSV file into a list of ProcessDescriptor objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in (".json", ".csv") and not path.is_file():
        raise InvalidInput(f"Workload not found: {path}")
    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise InvalidInput(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[ProcessDescriptor]:
    with path.open("r", encoding="utf-8-sig") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"{path}: not valid JSON ({exc})") from exc
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"{path}: not UTF-8 text ({exc.reason})") from exc

    if not isinstance(raw, list):
        raise InvalidInput("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[ProcessDescriptor]:
    processes: List[ProcessDescriptor] = []
    # utf-8-sig drops the byte-order mark spreadsheet exports put in front.
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        try:
            for row in csv.DictReader(f):
                processes.append(_process_from_mapping(row))
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"{path}: not UTF-8 text ({exc.reason})") from exc
    return processes


def _lookup(mapping: Mapping, field: str):
    for key in _FIELD_ALIASES[field]:
        if key in mapping:
            return mapping[key]
    raise KeyError(field)


def _to_int(value) -> int:
    """
    Whole numbers only: ``2`` and ``2.0`` load, ``2.7`` and ``true`` do not.
    """
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected an integer, got {value!r}")
    return int(value)


def _process_from_mapping(mapping) -> ProcessDescriptor:
    if not isinstance(mapping, Mapping):
        raise InvalidInput(f"Invalid process entry: {mapping!r}")

    try:
        pid = str(_lookup(mapping, "pid")).strip()
        arrival_time = _to_int(_lookup(mapping, "arrival_time"))
        burst_time = _to_int(_lookup(mapping, "burst_time"))
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid process entry: {mapping!r}") from exc

    priority_val = mapping.get("priority")
    try:
        priority = _to_int(priority_val) if priority_val not in (None, "") else 1
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid priority for {pid}: {priority_val!r}") from exc

    return ProcessDescriptor(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
