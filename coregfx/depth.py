import weakref


class Depth:
    """Draw list bucketed by depth. Higher depths are drawn over lower ones.

    Buckets keep insertion order, so wraps added at the same depth are always
    drawn in the order they were added. Keys are only sorted at render time.
    """

    def __init__(self):
        self.map = {}

    def add(self, n, wrap):
        self.map.setdefault(n, []).append(wrap)
        wrap._owner = weakref.ref(self)
        wrap.depth = n

    def remove(self, wrap):
        for n, bucket in self.map.items():
            for i, item in enumerate(bucket):
                if item is wrap:
                    del bucket[i]
                    if not bucket:
                        del self.map[n]
                    wrap._owner = None
                    return

    def get(self, n) -> list:
        return list(self.map.get(n, ()))

    def keys(self) -> list:
        return [n for n, bucket in self.map.items() if bucket]

    def clear(self):
        old, self.map = self.map, {}
        for bucket in old.values():
            for wrap in bucket:
                wrap._owner = None

    def __len__(self):
        return sum(len(bucket) for bucket in self.map.values())

    def __contains__(self, wrap):
        return any(item is wrap for bucket in self.map.values() for item in bucket)
