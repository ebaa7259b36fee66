"""Core data types: node taints and the per-node summary row."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

# The zero instant used when a node's creation time is unknown.
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


class TaintEffect(str, Enum):
    """What a taint does to pods that do not tolerate it."""

    NO_SCHEDULE = "NoSchedule"
    PREFER_NO_SCHEDULE = "PreferNoSchedule"
    NO_EXECUTE = "NoExecute"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Taint:
    """A single node taint: key, optional value and effect."""

    key: str
    value: str
    effect: TaintEffect

    def __post_init__(self) -> None:
        object.__setattr__(self, "effect", TaintEffect(self.effect))

    def __str__(self) -> str:
        if self.value:
            return f"{self.key}={self.value}:{self.effect.value}"
        return f"{self.key}:{self.effect.value}"


@dataclass
class NodeInfo:
    """Everything shown about one node in a single table row."""

    name: str = ""
    pods_used: int = 0
    pods_max: int = 0
    cpu_request_cores: float = 0.0
    cpu_limit_cores: float = 0.0
    cpu_usage_cores: float = 0.0
    cpu_capacity_cores: float = 0.0
    cpu_load_percent: int = 0
    mem_request_gb: float = 0.0
    mem_limit_gb: float = 0.0
    mem_usage_gb: float = 0.0
    mem_capacity_gb: float = 0.0
    mem_load_percent: int = 0
    ec2_instance_id: str = ""
    instance_type: str = ""
    capacity_type: str = ""
    architecture: str = ""
    zone: str = ""
    nodepool: str = ""
    nodeclaim: str = ""
    autoscaler: str = ""
    age: str = ""
    taint_str: str = ""
    taint_sort_key: str = ""
    taints: list[Taint] = field(default_factory=list)
    creation_time: datetime = _ZERO_TIME