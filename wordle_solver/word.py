"""
Packed Five-Letter Words
========================

A Word stores its five lowercase letters in one int, 5 bits per letter,
first letter in the highest bits. Comparing the packed values compares the
words letter by letter, so sorting Words sorts them alphabetically.
"""

from typing import Iterable, Iterator, List

import numpy as np


WORD_LENGTH = 5
LETTER_BITS = 5
LETTER_MASK = 31


class Word:
    """An immutable, lowercase, five-letter word."""

    __slots__ = ('value',)

    def __init__(self, text: str):
        if len(text) != WORD_LENGTH:
            raise ValueError(f"Invalid word: '{text}' (must be {WORD_LENGTH} letters)")
        if not text.isascii():
            raise ValueError(f"Invalid word: '{text}' (letters a-z only)")

        value = 0
        for c in text.lower():
            if c < 'a' or c > 'z':
                raise ValueError(f"Invalid word: '{text}' (letters a-z only)")
            value = (value << LETTER_BITS) | (ord(c) - ord('a'))

        self.value = value

    @classmethod
    def from_value(cls, value: int) -> 'Word':
        word = cls.__new__(cls)
        word.value = value
        return word

    def letters(self) -> Iterator[int]:
        """Iterate over 0-based letter indices (a=0 .. z=25), first letter first."""
        for shift in range(LETTER_BITS * (WORD_LENGTH - 1), -1, -LETTER_BITS):
            yield (self.value >> shift) & LETTER_MASK

    def letter_at(self, position: int) -> int:
        return (self.value >> (LETTER_BITS * (WORD_LENGTH - 1 - position))) & LETTER_MASK

    def letters_in_word(self) -> int:
        """Return a 26-bit mask with a bit set for each letter in this word."""
        result = 0
        for c in self.letters():
            result |= 1 << c
        return result

    def has_repeat_letters(self) -> bool:
        seen = 0
        for c in self.letters():
            mask = 1 << c
            if seen & mask:
                return True
            seen |= mask
        return False

    def __str__(self) -> str:
        return ''.join(chr(ord('a') + c) for c in self.letters())

    def __repr__(self) -> str:
        return str(self)

    def __eq__(self, other) -> bool:
        return isinstance(other, Word) and self.value == other.value

    def __lt__(self, other: 'Word') -> bool:
        return self.value < other.value

    def __le__(self, other: 'Word') -> bool:
        return self.value <= other.value

    def __gt__(self, other: 'Word') -> bool:
        return self.value > other.value

    def __ge__(self, other: 'Word') -> bool:
        return self.value >= other.value

    def __hash__(self) -> int:
        return hash(self.value)


def parse_lines(contents: str) -> List[Word]:
    """
    Parse a set of Words, one per line.

    Blank lines are skipped. Any other line which isn't a valid word is a
    fatal error, since line order fixes each word's index.
    """
    result = []
    for line_number, line in enumerate(contents.splitlines(), start=1):
        text = line.strip()
        if not text:
            continue
        try:
            result.append(Word(text))
        except ValueError as e:
            raise ValueError(f"Line {line_number}: {e}") from e
    return result


def load_words(filepath: str) -> List[Word]:
    """Load a word list file, one five-letter word per line."""
    with open(filepath, 'r', encoding='utf-8') as f:
        return parse_lines(f.read())


def wv(words: str) -> List[Word]:
    """Parse a comma-separated list of words ("soare, clint")."""
    return [Word(word.strip()) for word in words.split(',')]


def words_to_chars(words: Iterable[Word]) -> np.ndarray:
    """Convert words to a (n, 5) array of letter indices for the numba kernels."""
    words = list(words)
    arr = np.zeros((len(words), WORD_LENGTH), dtype=np.int32)
    for i, word in enumerate(words):
        for j, c in enumerate(word.letters()):
            arr[i, j] = c
    return arr


def interesting_letters(words: List[Word]) -> int:
    """
    Return a mask of the letters which could tell these words apart.

    Letters found at the same position in every word are excluded, since
    guessing them there reveals nothing new.
    """
    result = 0
    for word in words:
        result |= word.letters_in_word()

    if len(words) > 1:
        for position in range(WORD_LENGTH):
            letter = words[0].letter_at(position)
            if all(word.letter_at(position) == letter for word in words[1:]):
                result &= ~(1 << letter)

    return result
