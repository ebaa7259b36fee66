import io
from datetime import datetime, timezone

from hypothesis import given
from hypothesis import strategies as st

from k8i.model import NodeInfo, Taint, TaintEffect
from k8i.render import RenderConfig, format_capacity, render_table, truncate_to_fit


def sample_node(name):
    return NodeInfo(
        name=name,
        pods_used=5,
        pods_max=110,
        cpu_request_cores=1.5,
        cpu_limit_cores=3.0,
        cpu_usage_cores=2.0,
        cpu_capacity_cores=4.0,
        cpu_load_percent=50,
        mem_request_gb=4.0,
        mem_limit_gb=8.0,
        mem_usage_gb=6.0,
        mem_capacity_gb=16.0,
        mem_load_percent=38,
        ec2_instance_id="i-0000000000000000a",
        instance_type="m5.xlarge",
        capacity_type="spot",
        architecture="amd64",
        zone="1a",
        nodepool="pool-a",
        nodeclaim="claim-1",
        autoscaler="karpenter",
        age="5d12h",
        taint_str="none",
    )


def default_config(**overrides):
    cfg = RenderConfig(
        sort="pool=asc",
        timestamp=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        term_width=0,
    )
    for key, value in overrides.items():
        setattr(cfg, key, value)
    return cfg


def render(nodes, cfg):
    buf = io.StringIO()
    render_table(buf, nodes, cfg)
    return buf.getvalue()


def test_full_width():
    out = render([sample_node("node-1"), sample_node("node-2")], default_config())
    for text in ("NODE", "PODS", "CPU cores", "MEMORY GB", "Node info", "node-1", "node-2", "==="):
        assert text in out


def test_three_line_header():
    lines = render([sample_node("node-1")], default_config()).split("\n")
    assert len(lines) >= 5
    assert "NODE" in lines[0] and "CPU cores" in lines[0] and "MEMORY GB" in lines[0]
    assert "used/" in lines[1] and "req/lim/" in lines[1] and "LOAD" in lines[1]
    assert "max" in lines[2] and "use/total" in lines[2]
    assert lines[3].startswith("===")
    assert lines[3] == "=" * 152


def test_separator_uses_terminal_width():
    lines = render([sample_node("node-1")], default_config(term_width=80)).split("\n")
    assert lines[3] == "=" * 80


def test_data_row_format():
    out = render([sample_node("node-1")], default_config(no_headers=True))
    assert "1.5/3.0/2.0/4" in out
    assert "4.0/8.0/6.0/16" in out
    assert "i-0000000000000000a/m5.xlarge/spot/amd64/1a/pool-a/claim-1/5d12h/none" in out
    assert "5/110" in out
    assert "50%" in out
    assert "38%" in out


def test_data_row_exact_layout():
    out = render([sample_node("node-1")], default_config(no_headers=True))
    expected = (
        "node-1".ljust(45) + " " + "5/110".ljust(7) + " "
        + "1.5/3.0/2.0/4".ljust(17) + " " + "50% " + "  "
        + "4.0/8.0/6.0/16".ljust(19) + " " + "38% " + "  "
        + "i-0000000000000000a/m5.xlarge/spot/amd64/1a/pool-a/claim-1/5d12h/none\n"
    )
    assert out == expected


def test_capacity_formatting_in_row():
    node = sample_node("node-1")
    node.cpu_capacity_cores = 8.0
    node.mem_capacity_gb = 15.3
    out = render([node], default_config(no_headers=True))
    assert "/8" in out
    assert "/15.3" in out


def test_truncate_to_fit():
    result = truncate_to_fit("abcdefghij", 5)
    assert result == "abcd\u2026"
    assert len(result) == 5
    assert truncate_to_fit("abc", 10) == "abc"
    assert truncate_to_fit("abcde", 5) == "abcde"
    assert truncate_to_fit("abc", 0) == ""
    assert truncate_to_fit("abc", 1) == "\u2026"


def test_numeric_columns_never_truncated():
    node = sample_node("node-1")
    node.cpu_request_cores = 99.9
    node.mem_capacity_gb = 512.0
    node.pods_used = 100
    node.pods_max = 110
    out = render([node], default_config())
    assert "99.9" in out
    assert "512" in out
    assert "100/110" in out


def test_no_headers_mode():
    out = render([sample_node("node-1"), sample_node("node-2")], default_config(no_headers=True))
    lines = out.rstrip("\n").split("\n")
    assert "NODE" not in out
    assert "PODS" not in out
    assert "===" not in out
    assert len(lines) == 2
    assert "node-1" in lines[0]
    assert "node-2" in lines[1]


def _tainted(name, key, value, effect):
    node = sample_node(name)
    node.taints = [Taint(key, value, effect)]
    node.taint_str = str(node.taints[0])
    return node


def test_group_separators():
    nodes = [
        _tainted("node-1", "dedicated", "gpu", TaintEffect.NO_SCHEDULE),
        _tainted("node-2", "dedicated", "gpu", TaintEffect.NO_SCHEDULE),
        _tainted("node-3", "team", "backend", TaintEffect.NO_EXECUTE),
    ]
    out = render(nodes, default_config(group_by_taint=True))
    assert "~~~" in out
    assert out.count("~" * 152 + "\n") == 1


def test_group_separators_hidden_without_headers():
    nodes = [
        _tainted("node-1", "dedicated", "gpu", TaintEffect.NO_SCHEDULE),
        _tainted("node-3", "team", "backend", TaintEffect.NO_EXECUTE),
    ]
    out = render(nodes, default_config(group_by_taint=True, no_headers=True))
    assert "~" not in out
    assert len(out.rstrip("\n").split("\n")) == 2


def test_empty_node_list():
    assert "no nodes match filter" in render([], default_config())


def test_empty_node_list_no_headers():
    assert render([], default_config(no_headers=True)) == "no nodes match filter\n"


def test_no_annotations():
    out = render([sample_node("node-1")], default_config(filter="arch=amd64"))
    assert "Filter applied:" not in out
    assert "Data collected at:" not in out


def test_format_capacity():
    assert format_capacity(4.0) == "4"
    assert format_capacity(16.0) == "16"
    assert format_capacity(0.0) == "0"
    assert format_capacity(15.3) == "15.3"
    assert format_capacity(7.5) == "7.5"


_floats = lambda hi: st.floats(min_value=0, max_value=hi, allow_nan=False)  # noqa: E731

TAINT_DISPLAY = {
    "none": "none",
    "dedicated=gpu:NoSchedule": "dedicated=gpu:NoSch\u2026",
    "a:NoSchedule,b:NoExecute": "a:NoSchedule,b:NoEx\u2026",
}

node_strategy = st.builds(
    NodeInfo,
    name=st.from_regex(r"[a-z0-9\-]{1,40}", fullmatch=True),
    pods_used=st.integers(0, 110),
    pods_max=st.integers(0, 200),
    cpu_request_cores=_floats(64),
    cpu_limit_cores=_floats(64),
    cpu_usage_cores=_floats(64),
    cpu_capacity_cores=_floats(64),
    cpu_load_percent=st.integers(0, 100),
    mem_request_gb=_floats(512),
    mem_limit_gb=_floats(512),
    mem_usage_gb=_floats(512),
    mem_capacity_gb=_floats(512),
    mem_load_percent=st.integers(0, 100),
    ec2_instance_id=st.from_regex(r"i-[a-f0-9]{17}", fullmatch=True),
    instance_type=st.sampled_from(["m5.xlarge", "c5.2xlarge", "r5.large"]),
    capacity_type=st.sampled_from(["spot", "od", "x"]),
    architecture=st.sampled_from(["amd64", "arm64"]),
    zone=st.sampled_from(["1a", "1b", "2a"]),
    nodepool=st.from_regex(r"[a-z]{3,12}", fullmatch=True),
    nodeclaim=st.from_regex(r"[a-z]{3,18}", fullmatch=True),
    autoscaler=st.sampled_from(["karpenter", "cas", "spotio", "x"]),
    age=st.sampled_from(["5d12h", "3h45m", "12m", "0m"]),
    taint_str=st.sampled_from(sorted(TAINT_DISPLAY)),
)


@given(st.from_regex(r"[a-zA-Z0-9\-]{0,50}", fullmatch=True), st.integers(1, 50))
def test_truncation_property(s, max_len):
    result = truncate_to_fit(s, max_len)
    if len(s) > max_len:
        assert len(result) <= max_len
        assert result.endswith("\u2026")
    else:
        assert result == s


@given(node_strategy)
def test_numeric_columns_present(node):
    out = render([node], RenderConfig(no_headers=True))
    assert f"{node.pods_used}/{node.pods_max}" in out
    for value in (
        node.cpu_request_cores, node.cpu_limit_cores, node.cpu_usage_cores,
        node.mem_request_gb, node.mem_limit_gb, node.mem_usage_gb,
    ):
        assert f"{value:.1f}" in out


@given(st.lists(node_strategy, min_size=1, max_size=10))
def test_no_headers_property(nodes):
    cfg = default_config(filter="arch=amd64", no_headers=True)
    out = render(nodes, cfg)
    assert len(out.rstrip("\n").split("\n")) == len(nodes)
    assert "NODE" not in out
    assert "===" not in out


@given(node_strategy)
def test_row_contains_node_info(node):
    out = render([node], RenderConfig(no_headers=True))
    expected = "/".join((
        node.ec2_instance_id, node.instance_type, node.capacity_type,
        node.architecture, node.zone, node.nodepool, node.nodeclaim,
        node.age, TAINT_DISPLAY[node.taint_str],
    ))
    assert expected in out