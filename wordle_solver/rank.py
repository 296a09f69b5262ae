"""
Pairwise Ranking
================

Cluster splitting and turn formulas that score guess/answer pairs directly,
for word lists rather than BitSets. Builders use these on their maps of
ResponseSet -> answers.

A ResponseTable precomputes every guess/answer response with the numba
kernel, so repeated splits look responses up instead of rescoring.
"""

import time
from typing import Callable, Dict, List, Optional, Tuple

from .cluster_vector import ClusterVector
from .response import Response, ResponseSet, compute_response_matrix
from .word import Word, interesting_letters, words_to_chars


Strategy = List[Tuple[float, int, Word, Word]]


# ============================================================================
# RESPONSE TABLE
# ============================================================================

class ResponseTable:
    """
    Precomputed responses for every (guess, answer) pair.

    Pairs outside the table are scored directly, so a table over a subset of
    the words is still always correct.
    """

    def __init__(self, guesses: List[Word], answers: List[Word], verbose: bool = False):
        self.guesses = list(guesses)
        self.answers = list(answers)
        self.guess_to_idx = {word: i for i, word in enumerate(self.guesses)}
        self.answer_to_idx = {word: i for i, word in enumerate(self.answers)}

        if verbose:
            print(f"Computing response matrix ({len(self.guesses)} x {len(self.answers)})...")

        t0 = time.time()
        self.matrix = compute_response_matrix(words_to_chars(self.guesses), words_to_chars(self.answers))
        elapsed = time.time() - t0

        if verbose:
            pairs = len(self.guesses) * len(self.answers)
            rate = pairs / elapsed if elapsed > 0 else 0
            print(f"  Matrix computed in {elapsed:.2f}s ({rate:,.0f} pairs/s)")

    def score(self, guess: Word, answer: Word) -> Response:
        guess_index = self.guess_to_idx.get(guess)
        answer_index = self.answer_to_idx.get(answer)
        if guess_index is None or answer_index is None:
            return Response.score(guess, answer)
        return Response(int(self.matrix[guess_index, answer_index]))


def _scorer(table: Optional[ResponseTable]) -> Callable[[Word, Word], Response]:
    return table.score if table is not None else Response.score


# ============================================================================
# SPLITTING
# ============================================================================

def split(cluster: List[Word], guess: Word, table: Optional[ResponseTable] = None) -> Dict[Response, List[Word]]:
    """Split a cluster by the response each answer gives to 'guess'. The guess itself is left out."""
    score = _scorer(table)
    result: Dict[Response, List[Word]] = {}
    for answer in cluster:
        if answer == guess:
            continue
        result.setdefault(score(guess, answer), []).append(answer)
    return result


def split_as_set(cluster: List[Word], guess: Word, table: Optional[ResponseTable] = None) -> Tuple[Dict[ResponseSet, List[Word]], int]:
    """
    Split a cluster into a map keyed by one-response ResponseSets.

    Returns:
        (map, number of answers equal to the guess)
    """
    score = _scorer(table)
    result: Dict[ResponseSet, List[Word]] = {}
    excluded_count = 0

    for answer in cluster:
        if answer == guess:
            excluded_count += 1
            continue

        key = ResponseSet()
        key.push(score(guess, answer))
        result.setdefault(key, []).append(answer)

    return result, excluded_count


def split_map(clusters: Dict[ResponseSet, List[Word]], guess: Word, over_count: int = 0,
              table: Optional[ResponseTable] = None) -> Tuple[Dict[ResponseSet, List[Word]], int]:
    """
    Split every cluster over 'over_count' answers by 'guess', extending each key with the new response.

    Returns:
        (map, number of answers dropped: equal to the guess or in clusters too small to split)
    """
    score = _scorer(table)
    result: Dict[ResponseSet, List[Word]] = {}
    excluded_count = 0

    for responses, answers in clusters.items():
        if len(answers) <= over_count:
            excluded_count += len(answers)
            continue

        for answer in answers:
            if answer == guess:
                excluded_count += 1
                continue

            key = responses.copy()
            key.push(score(guess, answer))
            result.setdefault(key, []).append(answer)

    return result, excluded_count


def counts(cluster: List[Word], guess: Word, table: Optional[ResponseTable] = None) -> Dict[Response, int]:
    """Count the answers getting each response to 'guess'."""
    score = _scorer(table)
    result: Dict[Response, int] = {}
    for answer in cluster:
        if answer == guess:
            continue
        response = score(guess, answer)
        result[response] = result.get(response, 0) + 1
    return result


def is_safe_cluster(cluster: List[Word], table: Optional[ResponseTable] = None) -> bool:
    """
    Return whether every word in the cluster tells every other apart.

    Any word in a safe cluster can be guessed next.
    """
    if len(cluster) < 3:
        return True

    score = _scorer(table)
    for guess in cluster:
        seen = set()
        for answer in cluster:
            if answer == guess:
                continue
            response = score(guess, answer)
            if response in seen:
                return False
            seen.add(response)

    return True


# ============================================================================
# TURN FORMULAS
# ============================================================================

def total_turns_random(cluster: List[Word], table: Optional[ResponseTable] = None) -> float:
    """Expected total turns to solve every answer when guessing randomly within the cluster."""
    if len(cluster) == 1:
        # Singles are guessed the next turn
        return 1.0
    if len(cluster) == 2:
        # A pair takes 1 + 2 = 3 turns
        return 3.0

    total = 0.0
    for guess in cluster:
        for subcluster in split(cluster, guess, table).values():
            total += total_turns_random(subcluster, table)

    # One turn per answer, plus each subcluster total weighted by the odds of guessing 'guess'
    return len(cluster) + total / len(cluster)


def total_turns_random_map_exact(clusters: Dict[object, List[Word]], table: Optional[ResponseTable] = None) -> float:
    return sum(total_turns_random(cluster, table) for cluster in clusters.values())


def total_turns_random_map(clusters: Dict[object, List[Word]], table: Optional[ResponseTable] = None) -> int:
    return int(total_turns_random_map_exact(clusters, table))


def total_turns_perfect(cluster: List[Word], valid: List[Word], strategy: Optional[Strategy] = None,
                        table: Optional[ResponseTable] = None) -> float:
    """
    Total turns to solve every answer with the best guess at each step.

    Args:
        cluster: Answers left
        valid: Guesses to consider when no in-cluster guess is ideal
        strategy: If provided, (turns after guess, cluster size, first answer, guess)
            is appended for each cluster where the choice of guess mattered

    Returns:
        Total turns across all answers
    """
    length = len(cluster)
    if length == 1:
        return 1.0
    if length == 2:
        return 3.0

    options = []
    best_in_cluster_ideal = None
    worst_in_cluster_ideal = None

    for guess in cluster:
        score = ClusterVector.from_counts(counts(cluster, guess, table)).total_turns_ideal()
        if best_in_cluster_ideal is None or score < best_in_cluster_ideal:
            best_in_cluster_ideal = score
        if worst_in_cluster_ideal is None or score > worst_in_cluster_ideal:
            worst_in_cluster_ideal = score
        options.append((score, guess, True))

    # Best case for an out-of-cluster guess is that guess and then the answer, every time
    out_of_cluster_ideal = length
    if length > 3 and best_in_cluster_ideal > out_of_cluster_ideal:
        letters = interesting_letters(cluster)
        terrible = 2 * length - 1

        for guess in valid:
            if guess.letters_in_word() & letters == 0:
                continue

            score = ClusterVector.from_counts(counts(cluster, guess, table)).total_turns_ideal()

            # Leaves every answer in one cluster; would recurse forever
            if score == terrible:
                continue

            options.append((score, guess, False))
            if score <= out_of_cluster_ideal:
                break

    # Ideal turns ascending, in-cluster first, then alphabetical.
    # ISSUE: Ties in actual turns keep the option with the lowest ideal turns, which isn't
    # always the alphabetically first of the best guesses.
    options.sort(key=lambda option: (option[0], not option[2], option[1].value))

    best = None
    best_strategy: Strategy = []

    for i, (score, guess, in_cluster) in enumerate(options):
        # Stop when the remaining options can't beat the actual turns found
        if best is not None and i > 0 and score >= best[0]:
            break

        current_strategy: Strategy = []
        turns = sum(total_turns_perfect(subcluster, valid, current_strategy, table)
                    for subcluster in split(cluster, guess, table).values())

        if best is None or turns < best[0]:
            best = (turns, guess, in_cluster)
            best_strategy = current_strategy

    # If any in-cluster option wasn't as good, record the guess chosen
    if strategy is not None and (best[0] < worst_in_cluster_ideal or not best[2]):
        strategy.append((best[0], length, cluster[0], best[1]))
        strategy.extend(best_strategy)

    # One turn for the next guess for every answer, plus turns after it
    return length + best[0]
