"""
BitSet: a set of indices into one secrets array.

The set never owns the array; index i always means answers[i] for the
array the set was built against.
"""

from typing import Iterable, Iterator, Optional


class BitSet:
    # Native word width for the fast path. The backing int grows past this,
    # so sets over larger arrays stay exact instead of truncating.
    CAPACITY = 64

    __slots__ = ('bits',)

    def __init__(self, bits: int = 0):
        self.bits = bits

    @staticmethod
    def mask(limit: int) -> int:
        return (1 << limit) - 1

    @classmethod
    def new_all(cls, limit: int) -> 'BitSet':
        return cls(cls.mask(limit))

    @classmethod
    def from_indices(cls, indices: Iterable[int]) -> 'BitSet':
        result = cls()
        for index in indices:
            result.add(index)
        return result

    @classmethod
    def fits(cls, count: int) -> bool:
        """Whether 'count' indices fit in one native word."""
        return count <= cls.CAPACITY

    def copy(self) -> 'BitSet':
        return BitSet(self.bits)

    def add(self, index: int):
        if index < 0:
            raise IndexError(f"BitSet index must be non-negative: {index}")
        self.bits |= 1 << index

    def remove(self, index: int):
        if index < 0:
            raise IndexError(f"BitSet index must be non-negative: {index}")
        self.bits &= ~(1 << index)

    def contains(self, index: int) -> bool:
        if index < 0:
            raise IndexError(f"BitSet index must be non-negative: {index}")
        return (self.bits >> index) & 1 == 1

    def clear(self):
        self.bits = 0

    def all(self, limit: int):
        self.bits = self.mask(limit)

    def not_within(self, limit: int):
        """Complement this set among indices [0, limit)."""
        self.bits = ~self.bits & self.mask(limit)

    def count(self) -> int:
        return bin(self.bits).count('1')

    def first(self) -> Optional[int]:
        if self.bits == 0:
            return None
        return (self.bits & -self.bits).bit_length() - 1

    def union_with(self, other: 'BitSet'):
        self.bits |= other.bits

    def intersect_with(self, other: 'BitSet'):
        self.bits &= other.bits

    def except_with(self, other: 'BitSet'):
        self.bits &= ~other.bits

    def __iter__(self) -> Iterator[int]:
        # Ascending; iterates a copy of the bits, so the set is unchanged
        bits = self.bits
        while bits:
            low = bits & -bits
            yield low.bit_length() - 1
            bits ^= low

    def __contains__(self, index: int) -> bool:
        return self.contains(index)

    def __len__(self) -> int:
        return self.count()

    def __bool__(self) -> bool:
        return self.bits != 0

    def __or__(self, other: 'BitSet') -> 'BitSet':
        return BitSet(self.bits | other.bits)

    def __and__(self, other: 'BitSet') -> 'BitSet':
        return BitSet(self.bits & other.bits)

    def __sub__(self, other: 'BitSet') -> 'BitSet':
        return BitSet(self.bits & ~other.bits)

    def __eq__(self, other) -> bool:
        return isinstance(other, BitSet) and self.bits == other.bits

    def __hash__(self) -> int:
        return hash(self.bits)

    def __repr__(self) -> str:
        return f"BitSet({list(self)})"
