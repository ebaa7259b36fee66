"""Conversion between Kubernetes quantity strings and plain numbers."""

from __future__ import annotations

import math

_BYTES_PER_GB = 1024.0 * 1024.0 * 1024.0
_KI_PER_GB = 1048576.0
_MI_PER_GB = 1024.0


def _round_half_away(x: float) -> float:
    """Round to the nearest integer, halves away from zero."""
    whole = float(math.trunc(x))
    if abs(x - whole) >= 0.5:
        whole += math.copysign(1.0, x)
    return whole


def _parse_float(text: str) -> float:
    """Parse a decimal number strictly; 0.0 for anything unparseable."""
    if not text or text != text.strip() or "_" in text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    if math.isinf(value) and text.lstrip("+-").lower() not in ("inf", "infinity"):
        return 0.0
    return value


def parse_cpu(value: str) -> float:
    """Convert a CPU quantity such as "500m" or "2" to cores."""
    value = value.strip()
    if not value:
        return 0.0
    if value.endswith("n"):
        return _parse_float(value[:-1]) / 1e9
    if value.endswith("m"):
        return _parse_float(value[:-1]) / 1000.0
    return _parse_float(value)


def parse_memory(value: str) -> float:
    """Convert a memory quantity such as "512Mi" or "1Gi" to gigabytes."""
    value = value.strip()
    if not value:
        return 0.0
    if value.endswith("Ki"):
        return _parse_float(value[:-2]) / _KI_PER_GB
    if value.endswith("Mi"):
        return _parse_float(value[:-2]) / _MI_PER_GB
    if value.endswith("Gi"):
        return _parse_float(value[:-2])
    return _parse_float(value) / _BYTES_PER_GB


def format_cpu(cores: float) -> str:
    """Express cores as a CPU quantity: millicores below one core or when fractional."""
    if cores == 0:
        return "0"
    millis = _round_half_away(cores * 1000)
    if millis < 1000:
        return f"{int(millis)}m"
    if math.fmod(millis, 1000) == 0:
        return str(int(millis / 1000))
    return f"{int(millis)}m"


def format_memory(gb: float) -> str:
    """Express gigabytes as a memory quantity in the largest whole unit."""
    if gb == 0:
        return "0"
    if gb >= 1 and gb == math.trunc(gb):
        return f"{int(gb)}Gi"
    mi = gb * _MI_PER_GB
    mi_rounded = _round_half_away(mi)
    if abs(mi - mi_rounded) < 1e-9 and mi_rounded >= 1:
        return f"{int(mi_rounded)}Mi"
    ki_rounded = _round_half_away(gb * _KI_PER_GB)
    if ki_rounded >= 1:
        return f"{int(ki_rounded)}Ki"
    if math.isnan(gb):
        return "NaNGi"
    return f"{gb!r}Gi"


def parse_cpu_millicores(value: str) -> int:
    """Convert a CPU quantity to whole millicores."""
    return int(_round_half_away(parse_cpu(value) * 1000))


def calculate_load_percent(usage: int, capacity: int) -> int:
    """Usage as a rounded percentage of capacity; 0 if either is zero."""
    if capacity == 0 or usage == 0:
        return 0
    return int(_round_half_away(usage * 100.0 / capacity))