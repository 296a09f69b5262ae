"""
Cluster Vectors
===============

A ClusterVector is a histogram of cluster sizes left after a guess:
value[i] is the number of clusters with (i + 1) answers. [4, 1] means four
answers are fully identified and one pair is left.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from .bit_set import BitSet
from .parser import Parser


BIGGEST_CLUSTER_SHOWN = 5
SUMMARIZE_CLUSTER_COUNT = 20


class ClusterVector:
    def __init__(self, value: Optional[List[int]] = None):
        self.value = list(value) if value is not None else []

    def add(self, count: int):
        while len(self.value) < count:
            self.value.append(0)
        self.value[count - 1] += 1

    def add_counts(self, counts: Dict[object, int]):
        for count in counts.values():
            self.add(count)

    def add_map(self, clusters: Dict[object, list]):
        for answers in clusters.values():
            self.add(len(answers))

    @classmethod
    def from_map(cls, clusters: Dict[object, list]) -> 'ClusterVector':
        result = cls()
        result.add_map(clusters)
        return result

    @classmethod
    def from_counts(cls, counts: Dict[object, int]) -> 'ClusterVector':
        result = cls()
        result.add_counts(counts)
        return result

    @classmethod
    def from_bits(cls, split: Iterable[Tuple[object, BitSet]]) -> 'ClusterVector':
        result = cls()
        for _, answers in split:
            result.add(answers.count())
        return result

    def clear(self):
        self.value.clear()

    def cluster_count(self) -> int:
        return sum(self.value)

    def word_count(self) -> int:
        return sum(count * (i + 1) for i, count in enumerate(self.value))

    def biggest_cluster(self) -> int:
        biggest = 0
        for i, count in enumerate(self.value):
            if count > 0:
                biggest = i + 1
        return biggest

    def total_turns_ideal(self) -> int:
        # Every answer takes two turns, except one per cluster which is guessed first
        return 2 * self.word_count() - self.cluster_count()

    def total_turns_pessimistic(self) -> int:
        # Each n-cluster takes 1 + 2 + .. + n turns when nothing is learned from responses
        total = 0
        for i, count in enumerate(self.value):
            n = i + 1
            total += n * (n + 1) * count
        return total // 2

    def total_turns_predicted(self) -> int:
        """
        Predict total turns from cluster sizes alone.

        1-cluster: 1 turn. 2-cluster: 1 + 2 = 3 turns. 3-cluster: 5 or 6
        turns, about even odds, so 5.5. Larger n-cluster: 2 * n.
        """
        # Computed doubled to keep the 5.5 whole
        double_total = 0
        for i, count in enumerate(self.value):
            n = i + 1
            if n == 1:
                double_total += 2 * count
            elif n == 2:
                double_total += 6 * count
            elif n == 3:
                double_total += 11 * count
            else:
                double_total += 4 * n * count
        return double_total // 2

    def to_string(self) -> str:
        cluster_count = self.cluster_count()
        biggest_cluster = self.biggest_cluster()

        if cluster_count == 0:
            return ''

        shown = min(biggest_cluster, BIGGEST_CLUSTER_SHOWN)
        result = '[' + ', '.join(str(count) for count in self.value[:shown])

        # Show largest cluster size, if too many to show all
        if biggest_cluster > BIGGEST_CLUSTER_SHOWN:
            result += f" .. ^{biggest_cluster}"

        # Show total number of clusters, if enough to warrant
        if cluster_count > SUMMARIZE_CLUSTER_COUNT and biggest_cluster > 1:
            if biggest_cluster <= BIGGEST_CLUSTER_SHOWN:
                result += " .."
            result += f" ∑{cluster_count}"

        return result + ']'

    @staticmethod
    def parse(parser: Parser) -> Optional['ClusterVector']:
        """
        Parse a cluster vector at the current token.

        Returns None for a summarized vector ('..' present); the full
        vector can't be rebuilt safely from the summary.
        """
        parser.require('[')
        values = []

        while parser.current != ']':
            if parser.current == '..':
                while parser.current != ']':
                    parser.next()
                parser.require(']')
                return None

            values.append(parser.as_int())
            parser.next()

            # Require commas between values
            if parser.current != ']' and parser.current != '..':
                parser.require(',')

        parser.require(']')
        return ClusterVector(values)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"ClusterVector({self.value})"

    def __eq__(self, other) -> bool:
        return isinstance(other, ClusterVector) and self.value == other.value

    def __hash__(self) -> int:
        return hash(tuple(self.value))
