"""
Bounded LFU cache with O(1) get / set / delete and LRU tie-breaking.

The pandas trace harness lives in lfu_cache.simulator and lfu_cache.trace
and is not imported here.
"""
from .policies.base import BasePolicy
from .policies.lfu import LFUCache

__all__ = ["BasePolicy", "LFUCache"]
__version__ = "0.1.0"
