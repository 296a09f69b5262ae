"""
Game State
==========

The answers still possible in a game after some guesses, grouped by the
responses they would have given. Guesses can be filtered for one actual
response, as in a live game, or left open to see every cluster a guess
would split the answers into.
"""

from typing import Callable, Dict, List, Optional, Tuple

from .cluster_vector import ClusterVector
from .response import Response, ResponseSet
from .word import Word


class State:
    def __init__(self, answers: List[Word], valid: List[Word]):
        self.guesses: List[Tuple[Word, Optional[Response]]] = []
        self.remaining: Dict[ResponseSet, List[Word]] = {ResponseSet(): list(answers)}
        self.valid = valid

    def filter(self, guess: Word, response: Optional[Response] = None):
        """
        Play 'guess'. With a response, only answers giving that response are
        kept; without one, every answer is kept under the response it gives.
        """
        remaining: Dict[ResponseSet, List[Word]] = {}
        for responses, answers in self.remaining.items():
            for answer in answers:
                new_response = Response.score(guess, answer)
                if response is not None and new_response != response:
                    continue

                key = responses.copy()
                key.push(new_response)
                remaining.setdefault(key, []).append(answer)

        self.remaining = remaining
        self.guesses.append((guess, response))

    def best_next(self, ranker: Callable[[ClusterVector], int]) -> List[Tuple[int, Word, ClusterVector]]:
        """
        Score each allowed word as the next guess.

        Each word splits every cluster left; the sub-cluster sizes across all
        clusters make one ClusterVector, which 'ranker' scores (lower is better).

        Returns:
            (score, word, cluster vector) for each allowed word, in allowed order
        """
        options = []
        for word in self.valid:
            cv = ClusterVector()
            for answers in self.remaining.values():
                counts: Dict[Response, int] = {}
                for answer in answers:
                    if answer == word:
                        continue
                    response = Response.score(word, answer)
                    counts[response] = counts.get(response, 0) + 1
                cv.add_counts(counts)

            options.append((ranker(cv), word, cv))

        return options

    def to_cluster_vector(self) -> ClusterVector:
        return ClusterVector.from_map(self.remaining)

    def answers_left(self) -> List[Word]:
        result = []
        for answers in self.remaining.values():
            result.extend(answers)
        return result

    def guesses_string(self) -> str:
        return ' '.join(str(guess) for guess, _ in self.guesses)

    def knowns_string(self) -> str:
        """Known letters for each guess with a response ('*****' without one)."""
        return ' '.join(response.to_knowns_string(guess) if response is not None else '*****'
                        for guess, response in self.guesses)
