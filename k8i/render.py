"""Plain-text table output for node rows."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TextIO

from k8i.model import NodeInfo
from k8i.taints import group_by_taints

_NAME_WIDTH = 45
_TAINT_WIDTH = 20
_DEFAULT_WIDTH = 152
_ELLIPSIS = "\u2026"


@dataclass
class RenderConfig:
    """Options for table output."""

    filter: str = ""
    sort: str = ""
    group_by_taint: bool = False
    timestamp: datetime | None = None
    term_width: int = 0
    no_headers: bool = False


def truncate_to_fit(s: str, max_len: int) -> str:
    """Cut s to max_len characters, ending in an ellipsis when shortened."""
    if max_len <= 0:
        return ""
    if len(s) <= max_len:
        return s
    if max_len == 1:
        return _ELLIPSIS
    return s[: max_len - 1] + _ELLIPSIS


def format_capacity(value: float) -> str:
    """Whole numbers without decimals, anything else to one decimal place."""
    if math.isfinite(value) and value == int(value):
        return str(int(value))
    return f"{value:.1f}"


def _row(a: str, b: str, c: str, d: str, e: str, f: str, g: str) -> str:
    return f"{a:<45} {b:<7} {c:<17} {d:<4}  {e:<19} {f:<4}  {g}\n"


def _header() -> str:
    return (
        _row("                    NODE", "PODS", "CPU cores", "CPU",
             "MEMORY GB", "MEM", "        Node info")
        + _row("", "used/", "req/lim/", "LOAD", "req/lim/", "LOAD",
               "     ec2/type/spot/arch/")
        + _row("", "max", "use/total", "", "use/total", "",
               "     zone/pool/nodeclaim/age/taints")
    )


def _rule(char: str, term_width: int) -> str:
    width = term_width if term_width > 0 else _DEFAULT_WIDTH
    return char * width + "\n"


def _data_row(node: NodeInfo) -> str:
    name = truncate_to_fit(node.name, _NAME_WIDTH)
    pods = f"{node.pods_used}/{node.pods_max}"
    cpu = (
        f"{node.cpu_request_cores:.1f}/{node.cpu_limit_cores:.1f}/"
        f"{node.cpu_usage_cores:.1f}/{format_capacity(node.cpu_capacity_cores)}"
    )
    mem = (
        f"{node.mem_request_gb:.1f}/{node.mem_limit_gb:.1f}/"
        f"{node.mem_usage_gb:.1f}/{format_capacity(node.mem_capacity_gb)}"
    )
    info = "/".join((
        node.ec2_instance_id, node.instance_type, node.capacity_type,
        node.architecture, node.zone, node.nodepool, node.nodeclaim,
        node.age, truncate_to_fit(node.taint_str, _TAINT_WIDTH),
    ))
    return (
        f"{name:<45} {pods:<7} {cpu:<17} {node.cpu_load_percent}%".ljust(0)
        if False else
        f"{name:<45} {pods:<7} {cpu:<17} {f'{node.cpu_load_percent}%':<4}  "
        f"{mem:<19} {f'{node.mem_load_percent}%':<4}  {info}\n"
    )


def render_table(out: TextIO, nodes: Sequence[NodeInfo], config: RenderConfig) -> None:
    """Write the node table to out."""
    if not nodes:
        out.write("no nodes match filter\n")
        return

    if not config.no_headers:
        out.write(_header())
        out.write(_rule("=", config.term_width))

    if config.group_by_taint:
        groups = group_by_taints(nodes)
        for index, group in enumerate(groups):
            for node in group:
                out.write(_data_row(node))
            if index < len(groups) - 1 and not config.no_headers:
                out.write(_rule("~", config.term_width))
    else:
        for node in nodes:
            out.write(_data_row(node))