"""Ordering of node rows by a named column."""

from __future__ import annotations

import math
from collections.abc import Callable

from k8i.model import NodeInfo

SUPPORTED_SORT_COLUMNS: tuple[str, ...] = (
    "name", "pods", "cpu_req", "cpu_lim", "cpu_use", "cpu_cap", "cpu_load",
    "mem_req", "mem_lim", "mem_use", "mem_cap", "mem_load",
    "ec2_type", "instance_type", "arch", "zone", "pool", "age", "taint", "autoscaler",
)

NUMERIC_COLUMNS: tuple[str, ...] = (
    "pods", "cpu_req", "cpu_lim", "cpu_use", "cpu_cap", "cpu_load",
    "mem_req", "mem_lim", "mem_use", "mem_cap", "mem_load", "age",
)

_NUMERIC: dict[str, Callable[[NodeInfo], float]] = {
    "pods": lambda n: float(n.pods_used),
    "cpu_req": lambda n: n.cpu_request_cores,
    "cpu_lim": lambda n: n.cpu_limit_cores,
    "cpu_use": lambda n: n.cpu_usage_cores,
    "cpu_cap": lambda n: n.cpu_capacity_cores,
    "cpu_load": lambda n: float(n.cpu_load_percent),
    "mem_req": lambda n: n.mem_request_gb,
    "mem_lim": lambda n: n.mem_limit_gb,
    "mem_use": lambda n: n.mem_usage_gb,
    "mem_cap": lambda n: n.mem_capacity_gb,
    "mem_load": lambda n: float(n.mem_load_percent),
    # Whole seconds since the epoch: ascending puts the oldest node first.
    "age": lambda n: float(math.floor(n.creation_time.timestamp())),
}

_TEXT: dict[str, Callable[[NodeInfo], str]] = {
    "name": lambda n: n.name,
    "ec2_type": lambda n: n.capacity_type,
    "instance_type": lambda n: n.instance_type,
    "arch": lambda n: n.architecture,
    "zone": lambda n: n.zone,
    "pool": lambda n: n.nodepool,
    "taint": lambda n: n.taint_sort_key,
    "autoscaler": lambda n: n.autoscaler,
}


def numeric_value(node: NodeInfo, column: str) -> float:
    """The number a numeric column sorts by; 0.0 for other columns."""
    getter = _NUMERIC.get(column)
    return getter(node) if getter else 0.0


def text_value(node: NodeInfo, column: str) -> str:
    """The string a text column sorts by; empty for other columns."""
    getter = _TEXT.get(column)
    return getter(node) if getter else ""


def sort_nodes(nodes: list[NodeInfo], column: str, direction: str) -> None:
    """Sort nodes in place by column, "asc" or "desc".

    Raises ValueError for an unknown column or direction.
    """
    if column not in SUPPORTED_SORT_COLUMNS:
        raise ValueError(
            f'unsupported sort column "{column}", supported columns: '
            + ", ".join(SUPPORTED_SORT_COLUMNS)
        )
    if direction not in ("asc", "desc"):
        raise ValueError(
            f'invalid sort direction "{direction}", supported directions: asc, desc'
        )

    if column in _NUMERIC:
        nodes.sort(key=_NUMERIC[column])
    else:
        nodes.sort(key=_TEXT[column])
    if direction == "desc":
        nodes.reverse()