import pandas as pd
import pytest

import lfu_cache
from lfu_cache import LFUCache
from lfu_cache.simulator import CacheSim
from lfu_cache.trace import op_trace, zipf_trace


def test_apply_runs_documented_scenario():
    df = op_trace([
        ("set", "k1", "v1"), ("set", "k2", "v2"), ("set", "k3", "v3"),
        ("get", "k1"), ("get", "k1"), ("get", "k3"),
        ("get", "k2"), ("get", "k2"),
        ("set", "k4", "v4"),
        ("get", "k3"),
        ("delete", "k1"),
    ])
    sim = CacheSim(3)
    out = sim.apply(df)

    assert list(out.columns) == ["op", "key", "result", "count"]
    assert len(out) == len(df)
    assert out["result"].iloc[3] == "v1"
    assert pd.isna(out["result"].iloc[9])      # k3 was evicted
    assert out["count"].tolist() == [1, 2, 3, 3, 3, 3, 3, 3, 3, 3, 2]
    assert list(sim.policy) == [("k4", "v4"), ("k2", "v2")]


def test_apply_rejects_unknown_op():
    sim = CacheSim(2)
    with pytest.raises(ValueError):
        sim.apply(op_trace([("put", "a", 1)]))


def test_op_trace_rejects_malformed_tuple():
    with pytest.raises(ValueError):
        op_trace([("set",)])


def test_replay_hit_ratio():
    df = pd.DataFrame({"key": ["a", "b", "a", "a", "c", "b"]})
    sim = CacheSim(2, LFUCache)
    # a miss, b miss, a hit, a hit, c miss (evicts b), b miss
    assert sim.replay(df) == pytest.approx(2 / 6)
    assert [k for k, _ in sim.policy] == ["b", "a"]


def test_replay_custom_key_func():
    df = pd.DataFrame({"video": ["x", "x", "y"], "ladder": ["480p", "720p", "480p"]})
    sim = CacheSim(4)
    ratio = sim.replay(df, key_func=lambda r: f"{r.video}_{r.ladder}")
    assert ratio == 0.0
    assert "x_720p" in sim.policy


def test_replay_empty_trace_rejected():
    with pytest.raises(ValueError):
        CacheSim(2).replay(pd.DataFrame({"key": []}))


def test_zipf_trace_shape_and_determinism():
    a = zipf_trace(500, 50, alpha=1.1, seed=3)
    b = zipf_trace(500, 50, alpha=1.1, seed=3)
    assert list(a.columns) == ["ts", "key", "value"]
    assert len(a) == 500
    assert a.equals(b)
    assert a["key"].nunique() <= 50
    # rank-1 key dominates under a Zipf law
    assert a["key"].value_counts().index[0] == "k0"


@pytest.mark.parametrize("kwargs", [
    {"n_requests": 0, "n_keys": 5},
    {"n_requests": 10, "n_keys": 0},
    {"n_requests": 10, "n_keys": 5, "alpha": 0},
])
def test_zipf_trace_rejects_bad_arguments(kwargs):
    with pytest.raises(ValueError):
        zipf_trace(**kwargs)


def test_replay_zipf_trace_respects_capacity():
    df = zipf_trace(2000, 200, seed=0)
    sim = CacheSim(20)
    ratio = sim.replay(df)
    assert 0.0 < ratio < 1.0
    assert sim.policy.count == 20


def test_apply_set_without_value_deletes():
    sim = CacheSim(2)
    out = sim.apply(op_trace([("set", "a", 1), ("set", "a"), ("get", "b")]))
    assert "a" not in sim.policy
    assert sim.policy.is_empty
    assert out["count"].tolist() == [1, 0, 0]


def test_apply_keeps_int_values():
    sim = CacheSim(2)
    out = sim.apply(op_trace([("set", "a", 1), ("get", "a"), ("get", "b")]))
    value = sim.policy.get("a")
    assert value == 1
    assert not isinstance(value, float)
    assert out["result"].iloc[1] == 1
    assert not isinstance(out["result"].iloc[1], float)
    assert pd.isna(out["result"].iloc[2])


def test_apply_handles_hand_built_frame_with_nan():
    df = pd.DataFrame({"op": ["set", "set", "set"],
                       "key": ["a", "b", "a"],
                       "value": [1, 2, None]})
    assert df["value"].dtype == float
    sim = CacheSim(2)
    sim.apply(df)
    assert "a" not in sim.policy
    assert list(sim.policy) == [("b", 2.0)]


def test_replay_missing_value_falls_back_to_key():
    df = pd.DataFrame({"key": ["a", "b"], "value": [1, None]})
    sim = CacheSim(2)
    sim.replay(df)
    assert sim.policy.get("b") == "b"


def test_package_root_exports_only_the_cache():
    assert "LFUCache" in lfu_cache.__all__
    assert "CacheSim" not in lfu_cache.__all__
    assert not hasattr(lfu_cache, "CacheSim")
