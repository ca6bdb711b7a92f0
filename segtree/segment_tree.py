from .monoid import Sum, Min, Max
from .utils import next_power_of_two


class SegmentTree:
    """Fixed-length sequence of monoid elements with O(log n) range folds.

    Nodes live in one flat list of size 2 * capacity - 1. Index 0 is the
    root, node `ix` has children `2 * ix + 1` and `2 * ix + 2`, and the last
    `capacity` slots are the leaves. Leaves past `len(self)` are padding and
    always hold the identity.
    """

    def __init__(self, size, monoid):
        assert size >= 0, f'size must be non-negative, got {size}'
        self._len = size
        self._monoid = monoid
        self._capacity = next_power_of_two(size)
        self._values = [
            monoid.mempty() for _ in range(2 * self._capacity - 1)]

    @classmethod
    def from_sequence(cls, values, monoid):
        return cls._from_sequence(values, monoid)

    @classmethod
    def _from_sequence(cls, values, monoid):
        # Subclass constructors fix the monoid, so bypass them here.
        values = list(values)
        tree = cls.__new__(cls)
        SegmentTree.__init__(tree, len(values), monoid)
        tree._build(values)
        return tree

    def _build(self, values):
        offset = self._capacity - 1
        for i, value in enumerate(values):
            self._values[offset + i] = self._monoid.convert(value)

        # Children always have larger indices, so a reverse sweep finishes
        # each level before its parents.
        for ix in reversed(range(offset)):
            self._values[ix] = self._monoid.mappend(
                self._values[2 * ix + 1], self._values[2 * ix + 2])

    @property
    def monoid(self):
        return self._monoid

    @property
    def capacity(self):
        return self._capacity

    def __len__(self):
        return self._len

    def _check_index(self, idx):
        assert 0 <= idx < self._len, \
            f'index {idx} out of range for length {self._len}'

    def get(self, idx):
        self._check_index(idx)
        return self._values[self._capacity - 1 + idx]

    def set(self, idx, value):
        self._check_index(idx)
        value = self._monoid.convert(value)

        # Set value.
        idx += self._capacity - 1
        self._values[idx] = value

        # Update its ancestors iteratively.
        while idx > 0:
            idx = (idx - 1) // 2
            left = 2 * idx + 1
            self._values[idx] = self._monoid.mappend(
                self._values[left], self._values[left + 1])

    def combine_at(self, idx, value):
        """s[idx] = mappend(s[idx], value). The current value goes first."""
        current = self.get(idx)
        self.set(idx, self._monoid.mappend(
            current, self._monoid.convert(value)))

    def query(self, start=0, end=None):
        """Left-to-right fold of the half-open range [start, end).

        `end` defaults to len(self). Requires 0 <= start <= end <= len(self).
        """
        if end is None:
            end = self._len
        assert 0 <= start <= end, f'invalid range [{start}, {end})'
        assert end <= self._len, \
            f'range end {end} past length {self._len}'
        return self._query(0, self._capacity, start, end)

    def _query(self, ix, span, start, end):
        # [start, end) is already clipped to this node's span [0, span).
        if start == end:
            return self._monoid.mempty()
        if end - start == span:
            return self._values[ix]

        mid = span // 2
        left = self._query(
            2 * ix + 1, mid, min(start, mid), min(end, mid))
        right = self._query(
            2 * ix + 2, mid, max(start, mid) - mid, max(end, mid) - mid)
        return self._monoid.mappend(left, right)

    def __getitem__(self, idx):
        return self.get(idx)

    def __setitem__(self, idx, value):
        self.set(idx, value)

    def __repr__(self):
        values = [self.get(i) for i in range(self._len)]
        return f'{type(self).__name__}({values!r})'


class SumTree(SegmentTree):

    def __init__(self, size):
        super().__init__(size, Sum())

    @classmethod
    def from_sequence(cls, values):
        return cls._from_sequence(values, Sum())

    def sum(self, start=0, end=None):
        return self.query(start, end)

    def find_prefixsum_idx(self, prefixsum):
        assert self._len > 0
        assert 0 <= prefixsum <= self.sum() + 1e-5
        idx = 0

        # Traverse to the leaf.
        while idx < self._capacity - 1:
            left = 2 * idx + 1
            if self._values[left] > prefixsum:
                idx = left
            else:
                prefixsum -= self._values[left]
                idx = left + 1
        return min(idx - (self._capacity - 1), self._len - 1)


class MinTree(SegmentTree):

    def __init__(self, size):
        super().__init__(size, Min())

    @classmethod
    def from_sequence(cls, values):
        return cls._from_sequence(values, Min())

    def min(self, start=0, end=None):
        return self.query(start, end)


class MaxTree(SegmentTree):

    def __init__(self, size):
        super().__init__(size, Max())

    @classmethod
    def from_sequence(cls, values):
        return cls._from_sequence(values, Max())

    def max(self, start=0, end=None):
        return self.query(start, end)
