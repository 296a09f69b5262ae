"""
Strategy Tree Builders
======================

Builders construct a WordleTree for a named strategy. At each situation,
an ordered chain of rules is tried until one handles it. A rule can:

- Pass:       Take nothing off the map, add no nodes, and return None
- Filter:     Handle *some* clusters, add nodes for them under the parent,
              and return None so later rules handle the rest
- Summarize:  Handle everything left with one node and return it
- Branch:     Handle everything left with one node per cluster, recursing
              within each, and return the last node

When the returned node leaves clusters in the map (a new guess was played),
the builder recurses under it for the next turn.
"""

from typing import Dict, List, Optional

from .bit_set import BitSet
from .cluster_vector import ClusterVector
from .clubs import Clubs
from .rank import (ResponseTable, split, split_as_set, split_map,
                   total_turns_random, total_turns_random_map, total_turns_random_map_exact)
from .response import ResponseSet
from .word import Word, wv
from .wordle_tree import LIST_ANSWERS_MAX_COUNT, WordleGuess, WordleTree, WordleTreeIdentifier


DEFAULT_V11_GUESSES = "soare, clint"
DEFAULT_V11_THIRD = "dumpy"


class BuilderState:
    """
    The situations left to handle at one turn.

    Attributes:
        map: Answers left, keyed by the responses to the guesses so far
        turns_before: Guesses already played in these situations
        valid: Allowed guesses, for rules which search
        table: Precomputed responses for scoring
    """

    def __init__(self, answers: List[Word], valid: List[Word], table: Optional[ResponseTable] = None, verbose: bool = False):
        self.map: Dict[ResponseSet, List[Word]] = {}
        if answers:
            self.map[ResponseSet()] = sorted(answers)

        self.turns_before = 0
        self.valid = valid
        self.table = table
        self.verbose = verbose

    def answer_count(self) -> int:
        return sum(len(cluster) for cluster in self.map.values())


def add_except_last(node: WordleTree, parent: WordleTree, last: Optional[WordleTree]) -> WordleTree:
    """
    Add the previous 'last' node under parent and return node as the new last.

    Rules hold back their last node: returning it tells the builder the
    situation is fully handled.
    """
    if last is not None:
        parent.add_child(last)
    return node


def _finish(state: BuilderState, parent: WordleTree, last: Optional[WordleTree]) -> Optional[WordleTree]:
    # If clusters are left, add the held node and let the next rule handle the rest
    if state.map:
        if last is not None:
            parent.add_child(last)
        return None
    return last


# ============================================================================
# RULES
# ============================================================================

class GuessNextStandard:
    """Play each queued fixed guess in turn."""

    def __init__(self, guesses: List[Word]):
        self.queue = list(guesses)

    def attempt(self, state: BuilderState, parent: WordleTree) -> Optional[WordleTree]:
        if not self.queue:
            return None
        return play_specific(state, self.queue.pop(0))


def play_specific(state: BuilderState, guess: Word) -> WordleTree:
    current = WordleTree(WordleTreeIdentifier.any(), WordleGuess.specific(guess))

    inner_map, excluded_count = split_map(state.map, guess, 0, state.table)
    current.cluster_vector = ClusterVector.from_map(inner_map)
    state.map = inner_map

    # If the guess was one of the answers, it's solved this turn
    if excluded_count > 0:
        current.add_child(WordleTree.new_leaf([guess], float(state.turns_before + 1)))

    return current


class GuessSpecificUnderLetterCount:
    """Play 'guess' in clusters where fewer than 'count' letters are known so far."""

    def __init__(self, guess: Word, count: int):
        self.guess = guess
        self.count = count

    def attempt(self, state: BuilderState, parent: WordleTree) -> Optional[WordleTree]:
        last = None
        remaining = {}

        for responses, cluster in state.map.items():
            if responses.known_count() >= self.count:
                remaining[responses] = cluster
                continue

            current = WordleTree(WordleTreeIdentifier.cluster(cluster[0]), WordleGuess.specific(self.guess))
            current.answer_count = len(cluster)

            inner_map = split(cluster, self.guess, state.table)
            current.cluster_vector = ClusterVector.from_map(inner_map)
            current.outer_total_turns = float(len(cluster) * (state.turns_before + 1) + total_turns_random_map(inner_map, state.table))

            last = add_except_last(current, parent, last)

        state.map = remaining
        return _finish(state, parent, last)


class GuessRandomUpToLength:
    """Guess clusters of up to 'length' answers randomly, merged into one EqualsLength node per size."""

    def __init__(self, length: int):
        self.length = length

    def attempt(self, state: BuilderState, parent: WordleTree) -> Optional[WordleTree]:
        nodes = []
        for i in range(self.length):
            current = WordleTree(WordleTreeIdentifier.equals_length(i + 1), WordleGuess.RANDOM)
            current.answers = []
            nodes.append(current)

        remaining = {}
        for responses, cluster in state.map.items():
            if len(cluster) > self.length:
                remaining[responses] = cluster
                continue

            target = nodes[len(cluster) - 1]
            target.add_answers(cluster)
            target.outer_total_turns += state.turns_before * len(cluster) + total_turns_random(cluster, state.table)

        state.map = remaining

        last = None
        for current in nodes:
            if current.answer_count > 0:
                last = add_except_last(current, parent, last)

        return _finish(state, parent, last)


class GuessRandomSeparate:
    """Guess every cluster randomly, with a node for each cluster over two answers."""

    def attempt(self, state: BuilderState, parent: WordleTree) -> Optional[WordleTree]:
        last = GuessRandomUpToLength(2).attempt(state, parent)

        clusters = state.map
        state.map = {}

        for cluster in clusters.values():
            turns = len(cluster) * state.turns_before + total_turns_random(cluster, state.table)
            last = add_except_last(WordleTree.new_leaf(cluster, turns), parent, last)

        return last


class GuessRandomAllMerged:
    """Guess everything left randomly, summarized in one node."""

    def attempt(self, state: BuilderState, parent: WordleTree) -> Optional[WordleTree]:
        current = WordleTree(WordleTreeIdentifier.any(), WordleGuess.RANDOM)
        answer_count = state.answer_count()
        current.answer_count = answer_count
        current.outer_total_turns = answer_count * state.turns_before + total_turns_random_map_exact(state.map, state.table)

        if answer_count <= LIST_ANSWERS_MAX_COUNT:
            current.answers = [answer for cluster in state.map.values() for answer in cluster]

        state.map = {}
        return current


class GuessFirstUntilDone:
    """Always guess the alphabetically first answer left, until every answer is solved."""

    def attempt(self, state: BuilderState, parent: WordleTree) -> Optional[WordleTree]:
        last = None

        clusters = state.map
        state.map = {}

        for cluster in clusters.values():
            guess = cluster[0]
            node = WordleTree(WordleTreeIdentifier.cluster(guess), WordleGuess.specific(guess))

            # The guess itself was the answer
            if len(cluster) > 1:
                node.add_child(WordleTree.new_single_leaf(guess, state.turns_before))
            else:
                node.next_guess = WordleGuess.RANDOM
                node.answer_count = 1
                node.outer_total_turns = float(state.turns_before + 1)

            inner_map, _ = split_as_set(cluster, guess, state.table)
            node.cluster_vector = ClusterVector.from_map(inner_map)
            if len(cluster) <= LIST_ANSWERS_MAX_COUNT:
                node.answers = list(cluster)

            state.map = inner_map
            state.turns_before += 1
            last_child = self.attempt(state, node)
            state.turns_before -= 1

            if last_child is not None:
                node.add_child(last_child)

            last = add_except_last(node, parent, last)

        state.map = {}
        return last


class GuessBestUntilDone:
    """
    Play the strategy with the fewest total turns in each cluster, until every answer is solved.

    Clusters of one or two answers are guessed randomly; nothing beats that.
    Clusters over 'max_cluster_size' answers are left for later rules, since
    the search grows quickly with cluster size.
    """

    def __init__(self, max_cluster_size: Optional[int] = None):
        self.max_cluster_size = max_cluster_size

    def attempt(self, state: BuilderState, parent: WordleTree) -> Optional[WordleTree]:
        last = GuessRandomUpToLength(2).attempt(state, parent)
        if not state.map:
            return last

        remaining = {}
        for responses, cluster in state.map.items():
            if self.max_cluster_size is not None and len(cluster) > self.max_cluster_size:
                remaining[responses] = cluster
                continue

            if state.verbose:
                fast_path = "bitset" if BitSet.fits(len(cluster)) else "wide bitset"
                print(f"  Searching cluster of {len(cluster)} from '{cluster[0]}' ({fast_path})...")

            node = self._best_subtree(state, cluster)
            last = add_except_last(node, parent, last)

        state.map = remaining
        return _finish(state, parent, last)

    def _best_subtree(self, state: BuilderState, cluster: List[Word]) -> WordleTree:
        clubs = Clubs(cluster, state.valid, verbose=state.verbose)
        within = clubs.all_vector()

        choices = {}
        best_turns = clubs.count_best_turns(within, choices)

        sentinel = WordleTree.new_sentinel()
        clubs.best_strategy(within, choices, False, sentinel)
        node = sentinel.take_first_child()

        # Search totals start at this turn; make them include the turns to get here
        node.offset_turns(state.turns_before)
        node.outer_total_turns = float(best_turns + len(cluster) * state.turns_before)
        return node


# ============================================================================
# BUILDING
# ============================================================================

class TreeBuilder:
    """Builds a WordleTree by trying an ordered chain of rules at each turn."""

    def __init__(self, rules: list):
        self.rules = rules

    def build(self, answers: List[Word], valid: List[Word], table: Optional[ResponseTable] = None,
              verbose: bool = False) -> Optional[WordleTree]:
        root = WordleTree.new_sentinel()
        state = BuilderState(answers, valid, table, verbose)

        if state.map:
            self._build_recurse(state, root)

        return root.take_first_child()

    def _next(self, state: BuilderState, parent: WordleTree) -> WordleTree:
        for rule in self.rules:
            node = rule.attempt(state, parent)
            if node is not None:
                return node

        # Guess anything left randomly
        return GuessRandomAllMerged().attempt(state, parent)

    def _build_recurse(self, state: BuilderState, current: WordleTree):
        next_node = self._next(state, current)

        if state.map:
            state.turns_before += 1
            self._build_recurse(state, next_node)
            state.turns_before -= 1

        current.add_child(next_node)


def standard_rules(guesses: List[Word]) -> list:
    """Play all provided guesses, then random in-cluster guesses."""
    return [GuessNextStandard(guesses), GuessRandomUpToLength(2), GuessRandomAllMerged()]


def hybrid_rules(guesses: List[Word]) -> list:
    """Guess clusters under four randomly, otherwise standard; show the clusters left separately."""
    return [GuessRandomUpToLength(3), GuessNextStandard(guesses), GuessRandomSeparate()]


def best_rules(guesses: List[Word], max_cluster_size: Optional[int] = None) -> list:
    """Guess tiny clusters randomly, play the standard guesses, then the best strategy in each cluster."""
    return [GuessRandomUpToLength(3), GuessNextStandard(guesses), GuessBestUntilDone(max_cluster_size)]


def first_rules(guesses: List[Word]) -> list:
    """Guess tiny clusters randomly, play the standard guesses, then the alphabetically first answer each time."""
    return [GuessRandomUpToLength(3), GuessNextStandard(guesses), GuessFirstUntilDone()]


def v11_rules(guesses: List[Word]) -> list:
    """Guess SOARE, CLINT; then DUMPY if fewer than three letters are known; otherwise randomly in-cluster."""
    return [GuessNextStandard(wv(DEFAULT_V11_GUESSES)),
            GuessSpecificUnderLetterCount(Word(DEFAULT_V11_THIRD), 3),
            GuessRandomUpToLength(2),
            GuessRandomAllMerged()]


STRATEGIES = {
    'standard': standard_rules,
    'hybrid': hybrid_rules,
    'best': best_rules,
    'first': first_rules,
    'v11': v11_rules,
}


def build(strategy: str, answers: List[Word], guesses: List[Word], valid: Optional[List[Word]] = None,
          table: Optional[ResponseTable] = None, verbose: bool = False, **options) -> Optional[WordleTree]:
    """
    Build a WordleTree for a named strategy.

    Args:
        strategy: One of 'standard', 'hybrid', 'best', 'first', 'v11'
        answers: Possible answers
        guesses: Fixed guesses to open with
        valid: Allowed guesses for searching rules; defaults to the answers
        table: Precomputed responses; built for guesses and answers if not given
        verbose: Print progress
        **options: Passed to the strategy's rules (ex: max_cluster_size for 'best')

    Returns:
        The tree, or None if there are no answers

    Raises:
        ValueError: If the strategy name is unknown
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy: {strategy}")

    if valid is None:
        valid = list(answers)

    if table is None:
        scored = list(dict.fromkeys(list(guesses) + list(answers)))
        table = ResponseTable(scored, answers, verbose=verbose)

    builder = TreeBuilder(STRATEGIES[strategy](guesses, **options))
    return builder.build(answers, valid, table, verbose)
