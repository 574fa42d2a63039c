# src/lfu_cache/trace.py
"""
Synthetic traces for CacheSim.

zipf_trace() builds a read-through request trace (ts, key, value) whose key
popularity follows a truncated Zipf law, which is the regime where LFU
eviction pays off. op_trace() turns hand-written (op, key[, value]) tuples
into the DataFrame shape CacheSim.apply() expects.
"""
from typing import Iterable, Optional, Sequence

import numpy as np
import pandas as pd


def zipf_trace(n_requests: int, n_keys: int, alpha: float = 1.2,
               seed: Optional[int] = None) -> pd.DataFrame:
    if n_requests <= 0:
        raise ValueError(f"n_requests must be positive, got {n_requests}")
    if n_keys <= 0:
        raise ValueError(f"n_keys must be positive, got {n_keys}")
    if alpha <= 0:
        raise ValueError(f"alpha must be positive, got {alpha}")

    rng   = np.random.default_rng(seed)
    ranks = np.arange(1, n_keys + 1, dtype=float)
    probs = ranks ** -alpha
    probs /= probs.sum()

    idx  = rng.choice(n_keys, size=n_requests, p=probs)
    keys = [f"k{i}" for i in idx]
    return pd.DataFrame({
        "ts"   : np.arange(n_requests),
        "key"  : keys,
        "value": [f"v{i}" for i in idx],
    })


def op_trace(ops: Iterable[Sequence]) -> pd.DataFrame:
    rows = []
    for op in ops:
        if len(op) == 2:
            name, key = op
            value = None
        elif len(op) == 3:
            name, key, value = op
        else:
            raise ValueError(f"op tuples are (op, key[, value]), got {op!r}")
        rows.append((name, key, value))
    # object dtype keeps None and int payloads from being coerced to NaN / float
    return pd.DataFrame(rows, columns=["op", "key", "value"], dtype=object)
