# src/lfu_cache/policies/lfu.py
import logging
from typing import Any, Hashable, Iterator, Optional, Tuple

from .base import BasePolicy

logger = logging.getLogger(__name__)


class Entry:
    """One cached key/value pair, linked into its bucket's recency chain."""
    __slots__ = ("key", "value", "last_used", "bucket", "prev", "nxt")

    def __init__(self, key: Hashable, value: Any, last_used: int,
                 bucket: "FrequencyBucket"):
        self.key       = key
        self.value     = value
        self.last_used = last_used       # usage clock stamp, diagnostic only
        self.bucket    = bucket          # non-owning
        self.prev      = None
        self.nxt       = None


class FrequencyBucket:
    """
    All entries sharing one usage count.
    Chain head = least recently touched, tail = most recently touched.
    """
    __slots__ = ("usage_count", "head", "tail", "prev", "nxt")

    def __init__(self, usage_count: int):
        self.usage_count = usage_count
        self.head = None
        self.tail = None
        self.prev = None
        self.nxt  = None

    @property
    def is_empty(self) -> bool:
        return self.head is None

    def append(self, entry: Entry) -> None:
        entry.bucket = self
        entry.prev   = self.tail
        entry.nxt    = None
        if self.tail is None:
            self.head = entry
        else:
            self.tail.nxt = entry
        self.tail = entry

    def unlink(self, entry: Entry) -> None:
        if entry.prev is None:
            self.head = entry.nxt
        else:
            entry.prev.nxt = entry.nxt
        if entry.nxt is None:
            self.tail = entry.prev
        else:
            entry.nxt.prev = entry.prev
        entry.prev = entry.nxt = None
        entry.bucket = None


class LFUCache(BasePolicy):
    """
    Least-Frequently-Used cache with O(1) get / set / delete.

    Frequency buckets form a doubly-linked list in strictly ascending
    usage_count order; each bucket holds a doubly-linked recency chain of
    entries. Eviction takes the head entry of the head bucket, i.e. the
    least recently used entry among the least frequently used ones.

    Not thread-safe: callers serialize access themselves.
    """
    def __init__(self, capacity: int):
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise TypeError(f"capacity must be an int, got {type(capacity).__name__}")
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        super().__init__(capacity)
        self._index = {}                 # key -> Entry
        self._head  = None               # lowest usage_count bucket
        self._tail  = None               # highest usage_count bucket
        self._clock = 0                  # monotone usage counter

    # ----------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self._index

    @property
    def count(self) -> int:
        return len(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key) -> bool:
        # membership test, not a usage event
        return key in self._index

    # ----------------------------------------------------------
    def get(self, key, default=None):
        """
        Return the value for *key*, promoting it one frequency tier.
        A miss returns *default* and leaves the cache untouched.
        """
        entry = self._index.get(key)
        if entry is None:
            return default
        self._promote(entry)
        return entry.value

    def set(self, key, value) -> None:
        """
        Insert or overwrite *key*. Overwriting counts as a usage event.
        Setting None removes the key.
        """
        if value is None:
            self.delete(key)
            return

        entry = self._index.get(key)
        if entry is not None:
            self._promote(entry)
            entry.value = value
            return

        if len(self._index) == self.capacity:
            self._evict()

        bucket = self._first_usage_bucket()
        entry  = Entry(key, value, self._tick(), bucket)
        bucket.append(entry)
        self._index[key] = entry

    def delete(self, key) -> None:
        entry = self._index.pop(key, None)
        if entry is not None:
            self._remove(entry)

    __setitem__ = set
    __delitem__ = delete

    def request(self, key, value=None) -> bool:
        if key in self._index:
            self.get(key)
            return True
        # key doubles as the payload when the trace carries none
        self.set(key, key if value is None else value)
        return False

    def usage_count(self, key) -> Optional[int]:
        entry = self._index.get(key)
        return None if entry is None else entry.bucket.usage_count

    # ----------------------------------------------------------
    def items(self) -> Iterator[Tuple[Any, Any]]:
        """
        Yield (key, value) by ascending usage count, and within one count
        from least to most recently used. Iterating never promotes.
        """
        bucket = self._head
        while bucket is not None:
            entry = bucket.head
            while entry is not None:
                yield entry.key, entry.value
                entry = entry.nxt
            bucket = bucket.nxt

    def __iter__(self) -> Iterator[Tuple[Any, Any]]:
        return self.items()

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"{type(self).__name__}(capacity={self.capacity}, {{{pairs}}})"

    # ----------------------------------------------------------
    def _tick(self) -> int:
        stamp = self._clock
        self._clock += 1
        return stamp

    def _promote(self, entry: Entry) -> None:
        entry.last_used = self._tick()
        current = entry.bucket
        target  = self._bucket_after(current)
        self._remove(entry)
        target.append(entry)

    def _evict(self) -> None:
        entry = self._head.head          # LRU entry of the LFU tier
        usage = entry.bucket.usage_count
        self._remove(entry)
        del self._index[entry.key]
        logger.debug("evicted %r at usage_count=%d", entry.key, usage)

    def _remove(self, entry: Entry) -> None:
        """Unlink *entry* from its bucket and retire the bucket if it empties."""
        bucket = entry.bucket
        bucket.unlink(entry)
        if bucket.is_empty:
            self._unlink_bucket(bucket)

    # ---- bucket chain ----------------------------------------
    def _first_usage_bucket(self) -> FrequencyBucket:
        head = self._head
        if head is not None and head.usage_count == 1:
            return head
        bucket = FrequencyBucket(1)
        bucket.nxt = head
        if head is None:
            self._tail = bucket
        else:
            head.prev = bucket
        self._head = bucket
        return bucket

    def _bucket_after(self, bucket: FrequencyBucket) -> FrequencyBucket:
        """Bucket for bucket.usage_count + 1, linked right after *bucket*."""
        usage = bucket.usage_count + 1
        nxt   = bucket.nxt
        if nxt is not None and nxt.usage_count == usage:
            return nxt
        new = FrequencyBucket(usage)
        new.prev   = bucket
        new.nxt    = nxt
        bucket.nxt = new
        if nxt is None:
            self._tail = new
        else:
            nxt.prev = new
        return new

    def _unlink_bucket(self, bucket: FrequencyBucket) -> None:
        if bucket.prev is None:
            self._head = bucket.nxt
        else:
            bucket.prev.nxt = bucket.nxt
        if bucket.nxt is None:
            self._tail = bucket.prev
        else:
            bucket.nxt.prev = bucket.prev
        bucket.prev = bucket.nxt = None
