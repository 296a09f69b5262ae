"""
Clubs: Fast Cluster Splitting and Best-Turn Search
==================================================

Clubs precomputes, for each letter and position, the BitSet of answers with
that letter there ("clubs"). Splitting a cluster by a guess then takes a few
BitSet intersections per letter instead of scoring every guess/answer pair.

The search finds the guess minimizing total turns to solve every answer:

    f(H) = |H| + min over guesses t of  sum over responses s != GGGGG of f(P(H, t, s))

Optimizations:
1. Ideal-turns bound: skip any guess whose best conceivable split can't
   beat the best guess found so far
2. Memoization: cache results per cluster BitSet
3. Stop early once a guess reaches the ideal score and a worse one was seen
4. Out-of-cluster guesses are only tried when no in-cluster guess is ideal
"""

import time
from typing import Dict, Iterator, List, Optional, Tuple

from .bit_set import BitSet
from .cluster_vector import ClusterVector
from .response import ALL_GREEN, Response
from .word import Word, WORD_LENGTH
from .wordle_tree import LIST_ANSWERS_MAX_COUNT, WordleGuess, WordleTree, WordleTreeIdentifier


STATUS_INTERVAL = 2.0  # seconds between verbose search status lines

Choices = Dict[BitSet, Tuple[Word, int]]


class LetterClubs:
    """Answers containing one letter: anywhere, and at each position."""

    def __init__(self):
        self.any = BitSet()
        self.pos = [BitSet() for _ in range(WORD_LENGTH)]


class _BestConsiderState:
    """Running state of one count_best_turns search."""

    def __init__(self, within: BitSet, clubs: 'Clubs', choices: Choices):
        self.within = within
        self.clubs = clubs
        self.choices = choices

        # The initial best is the first word; find turns for it
        first_word = clubs.answers[within.first()]
        self.best = (first_word, clubs.count_best_turns_after(within, first_word, choices))
        self.was_worse = False
        self.ideal_turns = 2 * within.count() - 1

    def consider(self, guess: Word):
        guess_ideal_turns = self.clubs.count_ideal_turns(self.within, guess)

        # If this can't beat the best so far, skip finding exact turns
        if guess_ideal_turns >= self.best[1]:
            if guess_ideal_turns > self.best[1]:
                self.was_worse = True
            return

        best_turns = self.clubs.count_best_turns_after(self.within, guess, self.choices)
        if best_turns < self.best[1]:
            self.best = (guess, best_turns)
            self.was_worse = True

    def stop_searching(self) -> bool:
        # Stop once an ideal option is found and we know some choice is worse
        return self.best[1] == self.ideal_turns and self.was_worse


class Clubs:
    """
    Per-letter, per-position answer sets over a fixed answers list.

    All search methods take a BitSet ('within') of answer indices to work
    in, so that any cluster of the answers can be evaluated.
    """

    def __init__(self, answers: List[Word], valid: Optional[List[Word]] = None, verbose: bool = False):
        """
        Args:
            answers: Possible answers; index order fixes BitSet identity
            valid: Allowed guesses considered outside a cluster
            verbose: Print search progress every few seconds
        """
        self.answers = answers
        self.answer_count = len(answers)
        self.valid = valid if valid is not None else []
        self.letters = [LetterClubs() for _ in range(26)]

        self.verbose = verbose
        self.search_calls = 0
        self.last_status_time = time.time()

        # Add each answer to the club for each letter+position
        for word_index, word in enumerate(answers):
            for position, letter in enumerate(word.letters()):
                self.letters[letter].pos[position].add(word_index)

        # Fill out the 'any' club per letter as the union of all positions
        for club in self.letters:
            for pos in club.pos:
                club.any.union_with(pos)

    def all_vector(self) -> BitSet:
        return BitSet.new_all(self.answer_count)

    def cluster_to_words(self, cluster: BitSet) -> List[Word]:
        return [self.answers[index] for index in cluster]

    def vector_to_string(self, within: BitSet) -> str:
        if within.count() == self.answer_count:
            return "[*]"
        return '[' + ', '.join(str(word) for word in self.cluster_to_words(within)) + ']'

    # ------------------------------------------------------------------------
    # Splitting
    # ------------------------------------------------------------------------

    def split(self, guess: Word, within: BitSet) -> List[Tuple[Response, BitSet]]:
        """
        Return the clusters after guessing 'guess' within a set of answers.

        The guess itself (the all-green response) is never in a cluster.
        """
        return list(self.clusters(within, guess))

    def clusters(self, within: BitSet, guess: Word) -> Iterator[Tuple[Response, BitSet]]:
        letters = list(guess.letters())
        if guess.has_repeat_letters():
            return self._clusters_repeats(guess, letters, 0, within, 0)
        return self._clusters(letters, 0, within, 0)

    def _clusters(self, letters: List[int], index: int, matches: BitSet, tiles: int) -> Iterator[Tuple[Response, BitSet]]:
        if not matches:
            return

        if index >= WORD_LENGTH:
            if tiles != ALL_GREEN:
                yield Response(tiles), matches
            return

        club = self.letters[letters[index]]

        # Green: have this letter at this position
        green = club.pos[index] & matches
        yield from self._clusters(letters, index + 1, green, (tiles << 2) + 2)

        # Yellow: have this letter, but not at this position
        yellow = (club.any - green) & matches
        yield from self._clusters(letters, index + 1, yellow, (tiles << 2) + 1)

        # Black: don't have this letter at all
        black = matches - club.any
        yield from self._clusters(letters, index + 1, black, tiles << 2)

    def _clusters_repeats(self, guess: Word, letters: List[int], index: int, matches: BitSet, tiles: int) -> Iterator[Tuple[Response, BitSet]]:
        if not matches:
            return

        if index >= WORD_LENGTH:
            if tiles != ALL_GREEN:
                yield Response(tiles), matches
            return

        letter = letters[index]

        green = self.letters[letter].pos[index] & matches
        yield from self._clusters_repeats(guess, letters, index + 1, green, (tiles << 2) + 2)

        # Yellow only for answers with a *remaining* unmatched copy of the letter
        yellow = self.yellows_for(guess, letter, index, matches)
        yield from self._clusters_repeats(guess, letters, index + 1, yellow, (tiles << 2) + 1)

        black = matches - green - yellow
        yield from self._clusters_repeats(guess, letters, index + 1, black, tiles << 2)

    def yellows_for(self, guess: Word, letter: int, letter_index: int, within: BitSet) -> BitSet:
        """Find which answers get a yellow tile at letter_index when the guess repeats letters."""
        guess_letters = list(guess.letters())
        club = self.letters[letter]

        occurrences_before = 0
        have_any_unmatched = BitSet()
        for index, letter_here in enumerate(guess_letters):
            if letter_here == letter:
                if index < letter_index:
                    occurrences_before += 1
            else:
                # Answers with 'letter' where it was *not* guessed
                have_any_unmatched.union_with(club.pos[index])

        # Yellow only if not green here
        have_any_unmatched.except_with(club.pos[letter_index])
        have_any_unmatched.intersect_with(within)

        # For the first copy of 'letter' in the guess, any unmatched copy gives a yellow
        if occurrences_before == 0:
            return have_any_unmatched

        # Later copies only get yellow if earlier guess copies didn't absorb every unmatched copy
        had_enough_unmatched = BitSet()
        for answer_index in have_any_unmatched:
            answer_letters = list(self.answers[answer_index].letters())
            unmatched_count = 0

            for index, (answer_letter, guess_letter) in enumerate(zip(answer_letters, guess_letters)):
                if answer_letter == letter:
                    if guess_letter != letter:
                        unmatched_count += 1
                elif guess_letter == letter and index < letter_index:
                    # An earlier copy in the guess took an unmatched copy as its yellow
                    unmatched_count -= 1

            if unmatched_count > 0:
                had_enough_unmatched.add(answer_index)

        return had_enough_unmatched

    # ------------------------------------------------------------------------
    # Turn counts
    # ------------------------------------------------------------------------

    def count_ideal_turns(self, within: BitSet, guess: Word) -> int:
        """Lower bound: every cluster left is solved by its first guess or the one after."""
        turns_left = within.count()
        for _, cluster in self.clusters(within, guess):
            turns_left += 2 * cluster.count() - 1
        return turns_left

    def cluster_vector(self, within: BitSet, guess: Word) -> ClusterVector:
        cv = ClusterVector()
        for _, cluster in self.clusters(within, guess):
            cv.add(cluster.count())
        return cv

    def best_next_guess(self, within: BitSet) -> Tuple[Optional[Word], int]:
        """
        Return the best next guess and the total turns to solve each answer in 'within' with it.

        The guess is None when any in-cluster guess is equally good.
        """
        if not within:
            raise ValueError("No candidates")

        choices: Choices = {}
        best_turns = self.count_best_turns(within, choices)

        if within in choices:
            return choices[within]
        return None, best_turns

    def count_best_turns_after(self, within: BitSet, next_guess: Word, choices: Choices) -> int:
        # One turn per answer for next_guess itself
        outer_count = within.count()
        best_turns = outer_count

        for _, subcluster in self.clusters(within, next_guess):
            if subcluster == within:
                # Guess didn't split anything; disqualify it instead of recursing forever
                best_turns += outer_count * outer_count
            else:
                best_turns += self.count_best_turns(subcluster, choices)

        return best_turns

    def count_best_turns(self, within: BitSet, choices: Choices) -> int:
        outer_count = within.count()
        if outer_count < 3:
            # For one or two words, guessing either is best
            return 2 * outer_count - 1

        if within in choices:
            return choices[within][1]

        self.search_calls += 1
        if self.verbose and time.time() - self.last_status_time > STATUS_INTERVAL:
            print(f"  [clubs] calls={self.search_calls}, n={outer_count}, memo={len(choices)}")
            self.last_status_time = time.time()

        # Consider each in-cluster guess
        state = _BestConsiderState(within, self, choices)
        indices = iter(within)
        next(indices)
        for index in indices:
            state.consider(self.answers[index])
            if state.stop_searching():
                break

        # Out-of-cluster guesses take one more turn at best; consider them only if that could be better
        state.ideal_turns += 1
        if state.best[1] > state.ideal_turns:
            for guess in self.valid:
                state.consider(guess)
                if state.stop_searching():
                    break

        # No entry means any in-cluster guess is as good as any other
        if state.was_worse:
            choices[within] = state.best

        return state.best[1]

    def best_strategy(self, within: BitSet, choices: Choices, show_all: bool, parent: WordleTree):
        """Add the strategy found by count_best_turns for 'within' as a child of parent."""
        cluster_count = within.count()
        if cluster_count < 3 and not show_all:
            return

        first_word = self.answers[within.first()]
        identifier = WordleTreeIdentifier.cluster(first_word)

        if within in choices:
            best, turns = choices[within]
            node = WordleTree(identifier, WordleGuess.specific(best))
            node.outer_total_turns = float(turns)
        else:
            best = first_word
            node = WordleTree(identifier, WordleGuess.RANDOM)

        node.answer_count = cluster_count
        if cluster_count <= LIST_ANSWERS_MAX_COUNT:
            node.answers = self.cluster_to_words(within)

        for _, subcluster in self.clusters(within, best):
            self.best_strategy(subcluster, choices, show_all, node)

        # Children are only reachable after guessing the first word
        if node.next_guess.is_random() and node.has_children():
            node.next_guess = WordleGuess.specific(first_word)

        parent.add_child_without_rollup(node)

    def count_random_turns(self, within: BitSet) -> float:
        """Expected total turns when guessing randomly within the cluster each turn."""
        outer_count = within.count()
        if outer_count < 3:
            return float(2 * outer_count - 1)

        inner_total = 0.0
        for index in within:
            for _, subcluster in self.clusters(within, self.answers[index]):
                inner_total += self.count_random_turns(subcluster)

        return outer_count + inner_total / outer_count

    def count_random_turns_after(self, within: BitSet, next_guess: Word) -> float:
        best_turns = float(within.count())
        for _, subcluster in self.clusters(within, next_guess):
            best_turns += self.count_random_turns(subcluster)
        return best_turns

    def count_random_turns_after_cache(self, within: BitSet, next_guess: Word, cache: Dict[BitSet, float]) -> float:
        best_turns = float(within.count())
        for _, subcluster in self.clusters(within, next_guess):
            if subcluster not in cache:
                cache[subcluster] = self.count_random_turns(subcluster)
            best_turns += cache[subcluster]
        return best_turns

    def print_in_cluster(self, within: BitSet) -> str:
        """Show each word in a cluster with its ideal turns and cluster vector."""
        options = [(self.answers[index], self.count_ideal_turns(within, self.answers[index])) for index in within]
        options.sort(key=lambda option: (-option[1], option[0].value))

        result = ''
        for word, turns in options:
            result += f"{word}  {turns}  {self.cluster_vector(within, word)}\n"
        return result
