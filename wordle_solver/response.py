"""
Wordle Responses
================

A Response holds the five tiles returned for a guess, 2 bits per tile
(Black=0, Yellow=1, Green=2), first tile in the highest bits.

Scoring follows the Wordle duplicate-letter rule: greens are always marked;
other copies of a letter get yellow left to right, only while the answer has
copies left which weren't matched green.
"""

from typing import Iterator, List, Optional

import numpy as np
from numba import jit, prange

from .word import Word, WORD_LENGTH


# ============================================================================
# CONSTANTS
# ============================================================================

class Tile:
    BLACK = 0
    YELLOW = 1
    GREEN = 2


ALL_GREEN = (2 << 8) | (2 << 6) | (2 << 4) | (2 << 2) | 2  # 682
N_RESPONSE_VALUES = 1 << (2 * WORD_LENGTH)

EMOJI = {Tile.BLACK: '⬛', Tile.YELLOW: '🟨', Tile.GREEN: '🟩'}


# ============================================================================
# NUMBA-ACCELERATED SCORING
# ============================================================================

@jit(nopython=True, cache=True)
def compute_response(guess: np.ndarray, answer: np.ndarray) -> int:
    """
    Score a guess against an answer.

    Args:
        guess: shape (5,) array of letter indices (0-25)
        answer: shape (5,) array of letter indices

    Returns:
        Packed response value (2 bits per tile, first tile highest)
    """
    mismatched = np.zeros(26, dtype=np.int32)

    # Count the answer's copies of each letter not matched green
    for i in range(5):
        if guess[i] != answer[i]:
            mismatched[answer[i]] += 1

    value = 0
    for i in range(5):
        value = value << 2
        if guess[i] == answer[i]:
            value += 2
        elif mismatched[guess[i]] > 0:
            value += 1
            mismatched[guess[i]] -= 1

    return value


@jit(nopython=True, parallel=True, cache=True)
def compute_response_matrix(guess_chars: np.ndarray, answer_chars: np.ndarray) -> np.ndarray:
    """
    Score all guess/answer pairs in parallel.

    Args:
        guess_chars: shape (n_guesses, 5) array of letter indices
        answer_chars: shape (n_answers, 5) array of letter indices

    Returns:
        shape (n_guesses, n_answers) matrix of packed responses
    """
    n_guesses = guess_chars.shape[0]
    n_answers = answer_chars.shape[0]
    result = np.zeros((n_guesses, n_answers), dtype=np.uint16)

    for i in prange(n_guesses):
        for j in range(n_answers):
            result[i, j] = compute_response(guess_chars[i], answer_chars[j])

    return result


# ============================================================================
# RESPONSE
# ============================================================================

class Response:
    """The tiles returned for one guess."""

    __slots__ = ('value',)

    def __init__(self, value: int):
        self.value = value

    @staticmethod
    def score(guess: Word, answer: Word) -> 'Response':
        # Count how many mismatched copies of each letter there are in the answer
        mismatched = [0] * 26
        pairs = list(zip(guess.letters(), answer.letters()))
        for guess_letter, answer_letter in pairs:
            if guess_letter != answer_letter:
                mismatched[answer_letter] += 1

        value = 0
        for guess_letter, answer_letter in pairs:
            value <<= 2
            if guess_letter == answer_letter:
                value += Tile.GREEN
            elif mismatched[guess_letter] > 0:
                # Use up one unmatched copy for this yellow
                value += Tile.YELLOW
                mismatched[guess_letter] -= 1

        return Response(value)

    @staticmethod
    def from_str(text: str) -> 'Response':
        """Parse emoji tiles ("🟩🟨⬛🟨🟨") or letter codes ("GYByy")."""
        value = 0
        count = 0
        for c in text:
            count += 1
            value <<= 2
            if c in ('🟩', 'g', 'G'):
                value += Tile.GREEN
            elif c in ('🟨', 'y', 'Y'):
                value += Tile.YELLOW
            elif c in ('⬛', 'b', 'B'):
                value += Tile.BLACK
            else:
                raise ValueError(f"Invalid response: '{text}' (unknown tile '{c}')")

        if count != WORD_LENGTH:
            raise ValueError(f"Invalid response: '{text}' (must be {WORD_LENGTH} tiles)")

        return Response(value)

    @staticmethod
    def from_knowns_str(text: str) -> 'Response':
        """Parse a knowns string: uppercase is green, lowercase yellow, '.' or '_' black."""
        value = 0
        count = 0
        for c in text:
            count += 1
            value <<= 2
            if c.isascii() and c.isalpha():
                value += Tile.GREEN if c.isupper() else Tile.YELLOW
            elif c in ('.', '_'):
                value += Tile.BLACK
            else:
                raise ValueError(f"Invalid knowns: '{text}' (unknown character '{c}')")

        if count != WORD_LENGTH:
            raise ValueError(f"Invalid knowns: '{text}' (must be {WORD_LENGTH} characters)")

        return Response(value)

    def tiles(self) -> Iterator[int]:
        for shift in range(2 * (WORD_LENGTH - 1), -1, -2):
            yield (self.value >> shift) & 3

    def known_count(self) -> int:
        """Count the non-black tiles."""
        return sum(1 for tile in self.tiles() if tile != Tile.BLACK)

    def to_knowns_string(self, guess: Word) -> str:
        """Show known letters for the guess ("🟩🟨⬛🟨🟨" for soare -> "So.re")."""
        result = []
        for tile, letter in zip(self.tiles(), str(guess)):
            if tile == Tile.GREEN:
                result.append(letter.upper())
            elif tile == Tile.YELLOW:
                result.append(letter)
            else:
                result.append('.')
        return ''.join(result)

    def __str__(self) -> str:
        return ''.join(EMOJI[tile] for tile in self.tiles())

    def __repr__(self) -> str:
        return str(self)

    def __eq__(self, other) -> bool:
        return isinstance(other, Response) and self.value == other.value

    def __lt__(self, other: 'Response') -> bool:
        return self.value < other.value

    def __gt__(self, other: 'Response') -> bool:
        return self.value > other.value

    def __hash__(self) -> int:
        return hash(self.value)


# ============================================================================
# CONSTRAINT
# ============================================================================

class Constraint:
    """
    Letters an answer must and must not have, from the responses seen so far.

    Positions are ignored, so a Constraint is looser than re-scoring: every
    answer still possible matches it, but some words matching it may not be.
    """

    __slots__ = ('must_have_letters', 'must_not_have_letters')

    def __init__(self):
        self.must_have_letters = 0
        self.must_not_have_letters = 0

    def add(self, guess: Word, response: Response):
        must_have = 0
        must_not_have = 0

        for tile, letter in zip(response.tiles(), guess.letters()):
            if tile == Tile.BLACK:
                must_not_have |= 1 << letter
            else:
                must_have |= 1 << letter

        # A black repeat of a letter known elsewhere in the guess doesn't rule it out
        must_not_have &= ~must_have

        self.must_have_letters |= must_have
        self.must_not_have_letters |= must_not_have

    def matches(self, word: Word) -> bool:
        letters = word.letters_in_word()
        if letters & self.must_have_letters != self.must_have_letters:
            return False
        return letters & self.must_not_have_letters == 0


# ============================================================================
# RESPONSE SET
# ============================================================================

class ResponseSet:
    """
    A stack of Responses in one int, 10 bits per entry.

    Each entry is stored as value + 1 so that an all-black Response is still
    distinguishable from an empty slot. Order matters: the same Responses in
    another order are a different set.
    """

    __slots__ = ('responses',)

    def __init__(self, responses: int = 0):
        self.responses = responses

    def copy(self) -> 'ResponseSet':
        return ResponseSet(self.responses)

    def push(self, response: Response):
        self.responses = (self.responses << 10) | (response.value + 1)

    def pop(self) -> Optional[Response]:
        if self.responses == 0:
            return None
        response = Response((self.responses & 0x3FF) - 1)
        self.responses >>= 10
        return response

    def to_list(self) -> List[Response]:
        """Responses in the order they were pushed."""
        copy = self.copy()
        result = []
        response = copy.pop()
        while response is not None:
            result.append(response)
            response = copy.pop()
        result.reverse()
        return result

    def to_knowns(self, guesses: List[Word]) -> str:
        return ' '.join(response.to_knowns_string(guess) for response, guess in zip(self.to_list(), guesses))

    def known_count(self) -> int:
        """Total known letters across guesses; a letter known in several guesses counts each time."""
        return sum(response.known_count() for response in self.to_list())

    def __len__(self) -> int:
        return (self.responses.bit_length() + 9) // 10

    def __eq__(self, other) -> bool:
        return isinstance(other, ResponseSet) and self.responses == other.responses

    def __hash__(self) -> int:
        return hash(self.responses)

    def __repr__(self) -> str:
        return f"ResponseSet({self.responses})"
