# src/lfu_cache/policies/base.py
class BasePolicy:
    """
    Minimal contract shared by cache policies driven through CacheSim.
    request() is a read-through access: True on hit, False on miss
    (after the miss has been inserted).
    """
    def __init__(self, capacity: int):
        self.capacity = capacity

    def request(self, key, value=None) -> bool:
        raise NotImplementedError
