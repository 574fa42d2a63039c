import logging
from typing import Callable, Optional

import pandas as pd

from .policies.lfu import LFUCache

logger = logging.getLogger(__name__)

OPS = ("get", "set", "delete")


def _payload(value):
    # missing cells come back as NaN / NaT / pd.NA; treat them as an absent value
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return None
    return value


class CacheSim:
    """
    Replays a trace DataFrame through a cache policy that implements
      request(key, value=None) -> bool
    and, for explicit op traces, get / set / delete.
    """
    def __init__(self, capacity: int, policy_ctor: Callable = LFUCache):
        self.capacity = capacity
        self.policy   = policy_ctor(capacity)

    # ----------------------------------------------------------
    def replay(self, df: pd.DataFrame, key_func: Optional[Callable] = None,
               value_attr: str = "value") -> float:
        """Read-through replay of every row; returns the hit ratio."""
        if len(df) == 0:
            raise ValueError("cannot replay an empty trace")
        key_func = key_func or (lambda r: r.key)
        hits = 0
        for row in df.itertuples(index=False):
            key   = key_func(row)
            value = _payload(getattr(row, value_attr, None))
            if self.policy.request(key, value):
                hits += 1
        ratio = hits / len(df)
        logger.info("replayed %d requests at capacity %d: hit ratio %.4f",
                    len(df), self.capacity, ratio)
        return ratio

    def apply(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Execute an op trace (columns op, key, value) against the policy.
        Returns one row per op: op, key, result, count.
        """
        rows = []
        for row in df.itertuples(index=False):
            op, key = row.op, row.key
            if op == "get":
                result = self.policy.get(key)
            elif op == "set":
                self.policy.set(key, _payload(row.value))
                result = None
            elif op == "delete":
                self.policy.delete(key)
                result = None
            else:
                raise ValueError(f"unknown op {op!r}, expected one of {OPS}")
            rows.append((op, key, result, len(self.policy)))
        out = pd.DataFrame(rows, columns=["op", "key", "result", "count"], dtype=object)
        return out.astype({"count": int})
