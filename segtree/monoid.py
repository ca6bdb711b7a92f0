import operator
from functools import reduce
from itertools import product

import numpy as np


class Monoid:
    """Identity element plus an associative combine operation.

    The segment tree only relies on this contract. It never checks the laws
    at runtime, so an unlawful instance gives wrong aggregates instead of an
    error. Use `check_laws` in tests.

    Args:
        op: binary function, combining (a, b) in left-to-right order.
        identity: value e such that op(e, x) == op(x, e) == x.
        convert: optional function turning caller values into elements.
    """

    def __init__(self, op, identity, convert=None):
        self._op = op
        self._identity = identity
        self._convert = convert

    def mempty(self):
        return self._identity

    def mappend(self, a, b):
        return self._op(a, b)

    def mconcat(self, values):
        return reduce(self._op, values, self.mempty())

    def convert(self, value):
        if self._convert is None:
            return value
        return self._convert(value)

    def equal(self, a, b):
        return a == b


class Sum(Monoid):

    def __init__(self, identity=0):
        super().__init__(operator.add, identity)


class Product(Monoid):

    def __init__(self, identity=1):
        super().__init__(operator.mul, identity)


class Min(Monoid):

    def __init__(self, identity=float('inf')):
        super().__init__(min, identity)


class Max(Monoid):

    def __init__(self, identity=float('-inf')):
        super().__init__(max, identity)


class Concat(Monoid):
    # Not commutative: combine order is sequence order.

    def __init__(self, identity=''):
        convert = str if isinstance(identity, str) else tuple
        super().__init__(operator.add, identity, convert)


class BitOr(Monoid):

    def __init__(self):
        super().__init__(operator.or_, 0, int)


class BitAnd(Monoid):

    def __init__(self, bits=64):
        super().__init__(operator.and_, (1 << bits) - 1, int)


class VectorSum(Monoid):
    """Element-wise sum of fixed-shape arrays."""

    def __init__(self, shape, dtype=np.int64):
        self.shape = tuple(shape)
        self.dtype = np.dtype(dtype)
        identity = np.zeros(self.shape, dtype=self.dtype)
        identity.flags.writeable = False
        super().__init__(np.add, identity, self._as_array)

    # Elements are read-only copies, so callers never alias tree nodes.
    def _as_array(self, value):
        value = np.array(value, dtype=self.dtype)
        assert value.shape == self.shape, \
            f'expected shape {self.shape}, got {value.shape}'
        value.flags.writeable = False
        return value

    def mappend(self, a, b):
        result = np.add(a, b)
        result.flags.writeable = False
        return result

    def equal(self, a, b):
        if np.issubdtype(self.dtype, np.floating):
            return np.allclose(a, b)
        return np.array_equal(a, b)


MONOIDS = {
    'sum': Sum,
    'product': Product,
    'min': Min,
    'max': Max,
    'concat': Concat,
    'bit_or': BitOr,
    'bit_and': BitAnd,
    'vector_sum': VectorSum,
}


def make_monoid(name, **kwargs):
    if name not in MONOIDS:
        raise ValueError(
            f'unknown monoid {name!r}, expected one of {sorted(MONOIDS)}')
    return MONOIDS[name](**kwargs)


def check_laws(monoid, samples):
    """Returns True if identity and associativity hold over `samples`.

    Associativity is checked on every ordered triple, so keep `samples`
    small.
    """
    e = monoid.mempty()
    for x in samples:
        if not monoid.equal(monoid.mappend(e, x), x):
            return False
        if not monoid.equal(monoid.mappend(x, e), x):
            return False

    for a, b, c in product(samples, repeat=3):
        left = monoid.mappend(monoid.mappend(a, b), c)
        right = monoid.mappend(a, monoid.mappend(b, c))
        if not monoid.equal(left, right):
            return False
    return True
