"""Formatting, matching, sort keys and grouping for node taints."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from k8i.model import NodeInfo, Taint


def format_taints(taints: Sequence[Taint]) -> str:
    """Comma-separated display form of taints, or "none" when there are none."""
    if not taints:
        return "none"
    return ",".join(str(taint) for taint in taints)


def taint_set_key(taints: Sequence[Taint]) -> str:
    """Canonical key for a set of taints, ordered by key and joined by "|"."""
    ordered = sorted(taints, key=lambda taint: taint.key)
    return "|".join(str(taint) for taint in ordered)


def match_taint_filter(taints: Sequence[Taint], filter_value: str) -> bool:
    """Whether any taint matches a "KEY" or "KEY=VALUE" filter."""
    key, sep, value = filter_value.partition("=")
    if sep:
        return any(t.key == key and t.value == value for t in taints)
    return any(t.key == filter_value for t in taints)


def sort_key_from_taints(taints: Sequence[Taint]) -> str:
    """Alphabetically ordered taint keys joined by commas."""
    return ",".join(sorted(taint.key for taint in taints))


def group_by_taints(nodes: Iterable[NodeInfo]) -> list[list[NodeInfo]]:
    """Group nodes with identical taint sets, in order of first appearance."""
    groups: dict[str, list[NodeInfo]] = {}
    for node in nodes:
        groups.setdefault(taint_set_key(node.taints), []).append(node)
    return list(groups.values())