# k8i

Building blocks for a compact Kubernetes node inventory view. The package
parses resource quantities, describes and groups node taints, sorts node rows
by a named column, writes the node table to a text stream, and retries calls
that fail with transient errors using exponential backoff with jitter.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

### `k8i.model`

- `TaintEffect` — `NO_SCHEDULE`, `PREFER_NO_SCHEDULE`, `NO_EXECUTE` (values
  `"NoSchedule"`, `"PreferNoSchedule"`, `"NoExecute"`).
- `Taint(key, value, effect)` — a frozen dataclass; `str(taint)` gives
  `key=value:effect`, or `key:effect` when the value is empty.
- `NodeInfo` — one table row: pod counts, CPU figures in cores, memory figures
  in GB, load percentages, instance id, instance type, capacity type,
  architecture, zone, node pool, node claim, autoscaler, age text, taint
  display string, taint sort key, the taints themselves and the creation time.

### `k8i.parser`

- `parse_cpu("500m")` → `0.5`; accepts `n` (nano) and `m` (milli) suffixes or
  plain cores. Empty or unparseable input gives `0.0`.
- `parse_memory("512Mi")` → `0.5`; accepts `Ki`, `Mi`, `Gi` or plain bytes and
  returns gigabytes. Empty or unparseable input gives `0.0`.
- `format_cpu(cores)` and `format_memory(gb)` turn numbers back into quantity
  strings (`format_cpu(0.5)` → `"500m"`, `format_memory(0.5)` → `"512Mi"`).
- `parse_cpu_millicores("2")` → `2000`.
- `calculate_load_percent(usage, capacity)` — rounded percentage; `0` when
  either argument is zero.

### `k8i.taints`

- `format_taints(taints)` — comma-separated display form, `"none"` when empty.
- `taint_set_key(taints)` — taints ordered by key and joined with `|`.
- `match_taint_filter(taints, "KEY")` or `match_taint_filter(taints, "KEY=VALUE")`.
- `sort_key_from_taints(taints)` — taint keys sorted and joined with commas.
- `group_by_taints(nodes)` — lists of nodes with identical taint sets, groups in
  order of first appearance, nodes in their original order.

### `k8i.sorting`

- `sort_nodes(nodes, column, direction)` sorts a list in place. `column` is one
  of `SUPPORTED_SORT_COLUMNS`; those in `NUMERIC_COLUMNS` compare as numbers
  (`age` by creation time, oldest first when ascending), the rest as text.
  `direction` is `"asc"` or `"desc"`. Anything else raises `ValueError`.
- `numeric_value(node, column)` and `text_value(node, column)` give the value a
  column sorts by.

### `k8i.render`

- `render_table(out, nodes, RenderConfig(...))` writes to any text stream: a
  three-line header, a line of `=`, then one row per node. With no nodes it
  writes `no nodes match filter`.
- `RenderConfig` fields: `group_by_taint` (rows grouped by taint set, groups
  separated by a line of `~`), `term_width` (separator width; 152 when 0),
  `no_headers` (data rows only, no separators), plus `filter`, `sort` and
  `timestamp`, which are kept on the config but not printed.
- `truncate_to_fit(s, max_len)` — shortens with a trailing `…`.
- `format_capacity(value)` — `"4"` for whole numbers, `"15.3"` otherwise.

### `k8i.retry`

- `RetryConfig` — `max_retries`, `initial_backoff`, `max_backoff` (as
  `timedelta`), `jitter_fraction`, and an optional `logger` that receives a
  debug message before each retry. `default_retry_config()` gives 5 retries,
  100 ms rising to at most 1600 ms, 50 % jitter.
- `is_transient_error(err)` — true for `TimeoutError`, refused connections and
  `ApiStatusError` with status 429 or 5xx (anywhere in the exception chain);
  false for 401, 403, 404 and unrelated errors.
- `calculate_backoff(config, attempt)` — `initial * 2**attempt`, capped at
  `max_backoff`, plus up to `jitter_fraction` of that as random jitter.
- `with_retry(config, operation, fn, cancel=None)` — calls `fn` and returns its
  result. Permanent errors are raised unchanged; running out of retries, or a
  set `threading.Event` passed as `cancel`, raises `RetryError` carrying
  `operation`, `retries`, `last_error` and `cancelled`.

### `k8i.terminal`

- `get_terminal_width(default_width)` — columns of the terminal on standard
  output, or `default_width` when it is not a terminal.
- `is_terminal(fd)` — whether a file descriptor is a terminal.

## Example

```python
import sys

from k8i.model import NodeInfo
from k8i.render import RenderConfig, render_table
from k8i.sorting import sort_nodes

nodes = [
    NodeInfo(name="node-b", nodepool="pool-b", cpu_capacity_cores=4.0),
    NodeInfo(name="node-a", nodepool="pool-a", cpu_capacity_cores=8.0),
]
sort_nodes(nodes, "pool", "asc")
render_table(sys.stdout, nodes, RenderConfig())
```

## What it does not do

The package does not talk to a cluster: it does not fetch nodes, pods or
metrics, and `NodeInfo` rows must be filled in by the caller. There is no
command-line program, no filtering of nodes by attribute, no JSON or YAML
output and no coloured output; `render_table` writes plain text only.