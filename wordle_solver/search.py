"""
Guess Set Search
================

Finds the best sets of opening guesses for a list of answers: every
combination of 'count' guesses with distinct letters is scored by a ranking
function over the clusters of answers they leave, and the best few kept.

Ranking is the slow step, so it only runs for guess sets leaving at least
'cluster_cutoff' clusters. With a 'cluster_cutoff_ratio', the cutoff rises
as better sets are found, to that share of the best cluster count seen.
"""

from typing import Callable, Dict, List, Optional, Tuple

from .cluster_vector import ClusterVector
from .rank import ResponseTable
from .response import Response, ResponseSet
from .word import Word


BEST_COUNT = 20
RARE_LETTERS = Word("vzxqj").letters_in_word()
PROGRESS_EVERY = 10  # top-level guesses between verbose progress lines

Ranker = Callable[[Dict[ResponseSet, List[Word]]], int]
SearchResult = Tuple[int, List[Word], ClusterVector]


def score_cluster_count(clusters: Dict[ResponseSet, List[Word]]) -> int:
    """Rank guesses by how many clusters they leave; lower is better."""
    return 2500 - len(clusters)


class _SearchState:
    def __init__(self, answers: List[Word], ranker: Ranker, cluster_cutoff: float, cluster_cutoff_ratio: float,
                 guesses: List[Word], count: int, used_letters: int,
                 table: Optional[ResponseTable], verbose: bool):
        self.answers = answers
        self.ranker = ranker
        self.cluster_cutoff = cluster_cutoff
        self.cluster_cutoff_ratio = cluster_cutoff_ratio
        self.count_ranked = 0

        self.guesses = guesses
        self.used_letters = used_letters
        self.count_left = count
        self.original_count = count

        self.score = table.score if table is not None else Response.score
        self.verbose = verbose

        # The responses each answer gave to the guesses so far
        self.responses = [ResponseSet() for _ in answers]
        for guess in guesses:
            self.push(guess)

        self.best: List[SearchResult] = []

    def push(self, guess: Word):
        for responses, answer in zip(self.responses, self.answers):
            responses.push(self.score(guess, answer))

    def pop(self):
        for responses in self.responses:
            responses.pop()

    def consider(self, score: int, cv: ClusterVector):
        """Keep the current guesses if they're among the best found."""
        if len(self.best) >= BEST_COUNT:
            worst = max(range(len(self.best)), key=lambda i: self.best[i][0])
            if self.best[worst][0] <= score:
                return
            self.best.pop(worst)

        if self.verbose:
            print(f"{score}: {self.guesses} {cv.to_string()}")
        self.best.append((score, list(self.guesses), cv))


def find_best(answers: List[Word], valid: List[Word], initial_guesses: List[Word], count: int,
              ranker: Ranker, cluster_cutoff: float = 0.0, cluster_cutoff_ratio: float = 0.0,
              table: Optional[ResponseTable] = None, verbose: bool = False) -> List[SearchResult]:
    """
    Search for the best 'count' guesses to play after 'initial_guesses'.

    Args:
        answers: Answers the guesses must tell apart
        valid: Allowed guesses
        initial_guesses: Guesses already chosen; included in every result
        count: How many more guesses to choose
        ranker: Scores a map of responses -> answers; lower is better
        cluster_cutoff: Only rank guess sets leaving at least this many clusters
        cluster_cutoff_ratio: Raise the cutoff to this share of each ranked cluster count
        table: Precomputed responses, if available
        verbose: Print the best sets as they're found and progress

    Returns:
        Up to BEST_COUNT (score, guesses, cluster vector), best first
    """
    used_letters = 0
    for guess in initial_guesses:
        used_letters |= guess.letters_in_word()

    # Rare letters are never worth a guess early on
    if len(initial_guesses) < 2:
        used_letters |= RARE_LETTERS

    # Only words with new, distinct letters, unless choosing just a late guess
    if count > 1 or len(initial_guesses) <= 2:
        options = [option for option in valid
                   if option.letters_in_word() & used_letters == 0 and not option.has_repeat_letters()]
    else:
        options = list(valid)

    if verbose:
        print(f"Finding best {count} guesses after {initial_guesses} having at least {cluster_cutoff:.0f} "
              f"clusters within {len(options)} / {len(valid)} words with distinct letters...")

    state = _SearchState(answers, ranker, cluster_cutoff, cluster_cutoff_ratio, list(initial_guesses),
                         count, used_letters, table, verbose)
    _find_best_recurse(state, options)

    if verbose:
        print(f"Done. {state.count_ranked} combinations scored.")

    return sorted(state.best, key=lambda result: (result[0], [guess.value for guess in result[1]]))


def _find_best_recurse(state: _SearchState, options: List[Word]):
    if state.count_left <= 1:
        for guess in options:
            state.guesses.append(guess)
            state.push(guess)

            cluster_count = len(set(responses.responses for responses in state.responses))
            if cluster_count >= state.cluster_cutoff:
                new_cutoff = cluster_count * state.cluster_cutoff_ratio
                if new_cutoff > state.cluster_cutoff:
                    state.cluster_cutoff = new_cutoff
                    if state.verbose:
                        print(f"  CUTOFF -> {new_cutoff:.0f}  ({cluster_count} x {state.cluster_cutoff_ratio:.2f})")

                clusters: Dict[ResponseSet, List[Word]] = {}
                for responses, answer in zip(state.responses, state.answers):
                    clusters.setdefault(responses.copy(), []).append(answer)

                state.count_ranked += 1
                state.consider(state.ranker(clusters), ClusterVector.from_map(clusters))

            state.guesses.pop()
            state.pop()
        return

    letters_before = state.used_letters
    state.count_left -= 1

    for i, guess in enumerate(options):
        state.guesses.append(guess)
        state.push(guess)
        state.used_letters = letters_before | guess.letters_in_word()

        # Later options only; earlier ones were already paired with this one
        inner_options = [other for other in options[i + 1:] if other.letters_in_word() & state.used_letters == 0]
        _find_best_recurse(state, inner_options)

        state.guesses.pop()
        state.pop()

        if state.verbose and state.count_left == state.original_count - 1 and i % PROGRESS_EVERY == 0:
            print(f" --after {guess}  --cutoff {state.cluster_cutoff:.0f}")

    state.used_letters = letters_before
    state.count_left += 1
