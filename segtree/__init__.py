from .monoid import Monoid, Sum, Product, Min, Max, Concat, BitOr, BitAnd,\
    VectorSum, make_monoid, check_laws
from .segment_tree import SegmentTree, SumTree, MinTree, MaxTree
