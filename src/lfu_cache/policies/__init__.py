from .base import BasePolicy
from .lfu import Entry, FrequencyBucket, LFUCache

__all__ = ["BasePolicy", "Entry", "FrequencyBucket", "LFUCache"]
