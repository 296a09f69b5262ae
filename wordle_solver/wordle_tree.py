"""
Wordle Strategy Trees
=====================

A WordleTree describes a play strategy. It can be a full decision tree (a
specific next word in every situation), but it can also give one next guess
for many situations and mark "don't care" situations where the player
should guess randomly.

Text form, four spaces of indent per level:

    <turns> (<identifier>, <count>) -> <guess>  [<cluster vector>]  {<answers>}

    8552 (*, 2315) -> parse  [36, 15, 17, 11, 3 .. ^12 ∑108]
        43 (foyer, 8) -> rover  [2, 1, 1]  {foyer, hover, joker, ...}
        5.3 {fatal, tally, waltz}

The text form is easy for people and programs to read, so either can play
the strategy described.
"""

from typing import List, Optional, Tuple

from .cluster_vector import ClusterVector
from .formatting import pad_to_length, write_turns
from .parser import ParseError, Parser
from .response import Response
from .word import Word


LIST_ANSWERS_MAX_COUNT = 16

INDENT_WIDTH = 4
TURNS_WIDTH = 5
NEXT_GUESS_COLUMN = 17
ANSWERS_COLUMN = 64


# ============================================================================
# GUESSES AND IDENTIFIERS
# ============================================================================

class WordleGuess:
    """The next guess for a situation: a specific word, or random (RANDOM)."""

    __slots__ = ('word',)

    def __init__(self, word: Optional[Word] = None):
        self.word = word

    @classmethod
    def specific(cls, word: Word) -> 'WordleGuess':
        return cls(word)

    def is_random(self) -> bool:
        return self.word is None

    def _key(self) -> Tuple[int, int]:
        # Random sorts after any specific word
        if self.word is None:
            return (1, 0)
        return (0, self.word.value)

    def __str__(self) -> str:
        return '*' if self.word is None else str(self.word)

    def __repr__(self) -> str:
        return f"WordleGuess({self})"

    def __eq__(self, other) -> bool:
        return isinstance(other, WordleGuess) and self.word == other.word

    def __lt__(self, other: 'WordleGuess') -> bool:
        return self._key() < other._key()

    def __gt__(self, other: 'WordleGuess') -> bool:
        return self._key() > other._key()

    def __hash__(self) -> int:
        return hash(self._key())


WordleGuess.RANDOM = WordleGuess()


class WordleTreeIdentifier:
    """
    Which situations a subtree applies to.

    ANY applies to every game at this turn; EQUALS_LENGTH when the number of
    answers left is 'length'; CLUSTER when the alphabetically first answer
    left is 'word'; RESPONSE when the previous guess was 'word' and got
    'response'. Later kinds are more specific.
    """

    ANY = 0
    EQUALS_LENGTH = 1
    CLUSTER = 2
    RESPONSE = 3

    __slots__ = ('kind', 'length', 'word', 'response')

    def __init__(self, kind: int, length: int = 0, word: Optional[Word] = None, response: Optional[Response] = None):
        self.kind = kind
        self.length = length
        self.word = word
        self.response = response

    @classmethod
    def any(cls) -> 'WordleTreeIdentifier':
        return cls(cls.ANY)

    @classmethod
    def equals_length(cls, length: int) -> 'WordleTreeIdentifier':
        return cls(cls.EQUALS_LENGTH, length=length)

    @classmethod
    def cluster(cls, word: Word) -> 'WordleTreeIdentifier':
        return cls(cls.CLUSTER, word=word)

    @classmethod
    def from_response(cls, guess: Word, response: Response) -> 'WordleTreeIdentifier':
        return cls(cls.RESPONSE, word=guess, response=response)

    def is_cluster(self) -> bool:
        """Whether a match at this identifier ends the search for a more specific one."""
        return self.kind >= WordleTreeIdentifier.CLUSTER

    def matches(self, last_guess: Optional[Word], last_response: Optional[Response], cluster: List[Word]) -> bool:
        """Return whether this identifier matches the situation."""
        if self.kind == WordleTreeIdentifier.ANY:
            return True
        if self.kind == WordleTreeIdentifier.EQUALS_LENGTH:
            return len(cluster) == self.length
        if self.kind == WordleTreeIdentifier.CLUSTER:
            return len(cluster) > 0 and min(cluster) == self.word
        if last_guess is None or last_response is None:
            return False
        return last_guess == self.word and last_response == self.response

    def is_more_specific(self, other: 'WordleTreeIdentifier') -> bool:
        return self > other

    def _key(self) -> Tuple[int, int, int]:
        if self.kind == WordleTreeIdentifier.EQUALS_LENGTH:
            return (self.kind, self.length, 0)
        if self.kind == WordleTreeIdentifier.CLUSTER:
            return (self.kind, self.word.value, 0)
        if self.kind == WordleTreeIdentifier.RESPONSE:
            return (self.kind, self.word.value, self.response.value)
        return (self.kind, 0, 0)

    def __str__(self) -> str:
        if self.kind == WordleTreeIdentifier.EQUALS_LENGTH:
            return f"= {self.length}"
        if self.kind == WordleTreeIdentifier.CLUSTER:
            return str(self.word)
        if self.kind == WordleTreeIdentifier.RESPONSE:
            return f"> {self.response.to_knowns_string(self.word)}"
        return '*'

    def __repr__(self) -> str:
        return f"WordleTreeIdentifier({self})"

    def __eq__(self, other) -> bool:
        return isinstance(other, WordleTreeIdentifier) and self._key() == other._key()

    def __lt__(self, other: 'WordleTreeIdentifier') -> bool:
        return self._key() < other._key()

    def __gt__(self, other: 'WordleTreeIdentifier') -> bool:
        return self._key() > other._key()

    def __hash__(self) -> int:
        return hash(self._key())


class WordleTreeToStringOptions:
    def __init__(self, show_average_turns: bool = False, show_cluster_vectors: bool = True,
                 show_answers: bool = True, always_show_identifiers: bool = False,
                 show_zero_turn_paths: bool = False):
        self.show_average_turns = show_average_turns
        self.show_cluster_vectors = show_cluster_vectors
        self.show_answers = show_answers
        self.always_show_identifiers = always_show_identifiers
        self.show_zero_turn_paths = show_zero_turn_paths


# ============================================================================
# WORDLE TREE
# ============================================================================

class WordleTree:
    """
    One situation in a play strategy and the strategy for situations after it.

    Attributes:
        outer_total_turns: Turns to solve every answer here, including the guesses to get here
        identifier: The situations this subtree applies to
        answer_count: How many answers are left under this subtree
        next_guess: The guess to play in this situation
        answers: The specific answers here, shown in text when few enough
        cluster_vector: Cluster sizes after next_guess
        subtree: Strategy for the situations after next_guess
    """

    def __init__(self, identifier: WordleTreeIdentifier, next_guess: WordleGuess):
        self.outer_total_turns = 0.0
        self.identifier = identifier
        self.answer_count = 0
        self.next_guess = next_guess
        self.answers: Optional[List[Word]] = None
        self.cluster_vector: Optional[ClusterVector] = None
        self.subtree: Optional[List['WordleTree']] = None

    @classmethod
    def new_single_leaf(cls, word: Word, turns_before: int) -> 'WordleTree':
        result = cls(WordleTreeIdentifier.cluster(word), WordleGuess.RANDOM)
        result.outer_total_turns = float(turns_before + 1)
        result.answer_count = 1
        result.answers = [word]
        return result

    @classmethod
    def new_leaf(cls, answers: List[Word], total_turns: float) -> 'WordleTree':
        result = cls(WordleTreeIdentifier.cluster(answers[0]), WordleGuess.RANDOM)
        result.outer_total_turns = total_turns
        result.answer_count = len(answers)
        result.answers = list(answers)
        return result

    @classmethod
    def new_sentinel(cls) -> 'WordleTree':
        """An empty root to collect nodes under; take_first_child() returns the real root."""
        return cls(WordleTreeIdentifier.any(), WordleGuess.RANDOM)

    def has_children(self) -> bool:
        return bool(self.subtree)

    def children(self) -> List['WordleTree']:
        return self.subtree if self.subtree is not None else []

    def add_child(self, child: 'WordleTree'):
        self.outer_total_turns += child.outer_total_turns
        self.answer_count += child.answer_count
        self.add_child_without_rollup(child)

    def add_child_without_rollup(self, child: 'WordleTree'):
        if self.subtree is None:
            self.subtree = []
        self.subtree.append(child)

    def add_answers(self, cluster: List[Word]):
        if self.answers is None:
            self.answers = []
        self.answer_count += len(cluster)
        self.answers.extend(cluster)

    def take_first_child(self) -> Optional['WordleTree']:
        # Sentinels hold one child, so the last child added is the first
        if not self.subtree:
            return None
        return self.subtree.pop()

    def offset_turns(self, turns_before: int):
        """Add the turns taken before reaching this subtree to every total shown in it."""
        if self.outer_total_turns != 0:
            self.outer_total_turns += self.answer_count * turns_before
        for child in self.children():
            child.offset_turns(turns_before + 1)

    def ordered_children(self) -> List['WordleTree']:
        """Children in text order: most answers first, then specific guesses, then identifier descending."""
        return sorted(self.children(), key=_child_order)

    # ------------------------------------------------------------------------
    # Text Form
    # ------------------------------------------------------------------------

    def to_string(self, options: Optional[WordleTreeToStringOptions] = None) -> str:
        if options is None:
            options = WordleTreeToStringOptions()
        result = []
        self._add_to_string(options, 0, result)
        return ''.join(result)

    def _add_to_string(self, options: WordleTreeToStringOptions, indent: int, result: List[str]):
        result.append(self.line_to_string(options, indent))
        for child in self.ordered_children():
            child._add_to_string(options, indent + 1, result)

    def line_to_string(self, options: WordleTreeToStringOptions, indent: int) -> str:
        """The text line for this node alone, ending in a newline."""
        line = ' ' * (INDENT_WIDTH * indent)
        start = len(line)

        if self.outer_total_turns != 0:
            line += write_turns(self.outer_total_turns, self.answer_count, options.show_average_turns)
            line = pad_to_length(line, start + TURNS_WIDTH)

        # Show the identifier unless this is a small cluster with a random guess
        skip_identifier = (self.identifier.kind == WordleTreeIdentifier.CLUSTER
                           and self.next_guess.is_random()
                           and self.answer_count <= LIST_ANSWERS_MAX_COUNT
                           and not options.always_show_identifiers)

        if not skip_identifier:
            if len(line) > start:
                line += ' '
            line += f"({self.identifier}, {self.answer_count})"
            line = pad_to_length(line, start + NEXT_GUESS_COLUMN)
            line += f" -> {self.next_guess}"

        if options.show_cluster_vectors and self.cluster_vector is not None:
            cv = self.cluster_vector.to_string()
            if cv:
                if len(line) > start:
                    line += '  '
                line += cv

        if (skip_identifier or options.show_answers) and self.answers and len(self.answers) <= LIST_ANSWERS_MAX_COUNT:
            if not skip_identifier:
                line = pad_to_length(line, ANSWERS_COLUMN)
            if len(line) > start:
                line += ' '
            line += '{' + ', '.join(str(answer) for answer in sorted(self.answers)) + '}'

        return line + '\n'

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"WordleTree(({self.identifier}, {self.answer_count}) -> {self.next_guess})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, WordleTree):
            return False
        if (self.answer_count != other.answer_count
                or self.identifier != other.identifier
                or self.next_guess != other.next_guess
                or self._shown_cluster_vector() != other._shown_cluster_vector()
                or self._shown_answers() != other._shown_answers()):
            return False
        return self.ordered_children() == other.ordered_children()

    __hash__ = None

    def _shown_cluster_vector(self) -> Optional[ClusterVector]:
        # An empty vector isn't written, so it reads back as None
        if self.cluster_vector is None or self.cluster_vector.cluster_count() == 0:
            return None
        return self.cluster_vector

    def _shown_answers(self) -> Optional[List[Word]]:
        # Answers are written sorted, and only for small clusters
        if not self.answers or len(self.answers) > LIST_ANSWERS_MAX_COUNT:
            return None
        return sorted(self.answers)

    # ------------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------------

    @staticmethod
    def parse(text: str) -> 'WordleTree':
        """
        Parse a full WordleTree from text.

        Each line's parent is the closest line above it with less indent.

        Raises:
            ParseError: With the line and column of the first problem
        """
        parser = Parser(text)
        if not parser.current_line:
            raise parser.error("No tree to parse")

        stack: List[Tuple[int, WordleTree]] = []

        while True:
            indent = parser.char_in_line - 1

            # Close the open nodes which aren't above this one
            last = None
            while stack:
                parent_indent, parent = stack.pop()
                if last is not None:
                    parent.add_child_without_rollup(last[1])
                last = (parent_indent, parent)
                if parent_indent < indent:
                    break

            if last is not None:
                stack.append(last)

            previous_guess = None
            if stack and stack[-1][0] < indent:
                previous_guess = stack[-1][1].next_guess.word

            _, tree = WordleTree.parse_single(parser, previous_guess)
            stack.append((indent, tree))

            try:
                parser.next_line()
            except ParseError:
                break

        root = None
        while stack:
            _, parent = stack.pop()
            if root is not None:
                parent.add_child_without_rollup(root)
            root = parent

        return root

    @staticmethod
    def parse_single(parser: Parser, previous_guess: Optional[Word] = None) -> Tuple[int, 'WordleTree']:
        """
        Parse one node from the current line.

        Args:
            parser: Parser positioned at the first token of the line
            previous_guess: The parent's guess, which a '>' identifier refers to

        Returns:
            (indent, node)
        """
        # ex: 43 (foyer, 8) -> rover  [2, 1, 1]  {foyer, hover, joker, offer, roger, rover, rower, wooer}
        result = WordleTree.new_sentinel()
        indent = parser.char_in_line - 1

        # Outer Total Turns?
        try:
            result.outer_total_turns = parser.as_float()
            parser.next()
        except ParseError:
            pass

        # Identifier? (foyer, 8) | (*, 2315) | (= 1, 12) | (> So.re, 3)
        had_identifier = False
        if parser.current == '(':
            parser.next()
            had_identifier = True

            if parser.current == '=':
                parser.next()
                result.identifier = WordleTreeIdentifier.equals_length(parser.as_int())
            elif parser.current == '>':
                parser.next()
                result.identifier = WordleTree._parse_response_identifier(parser, previous_guess)
            else:
                word = parser.as_word()
                if word is not None:
                    result.identifier = WordleTreeIdentifier.cluster(word)

            parser.next()
            parser.require(',')

            result.answer_count = parser.as_int()
            parser.next()
            parser.require(')')

            parser.require('->')
            word = parser.as_word()
            result.next_guess = WordleGuess.RANDOM if word is None else WordleGuess.specific(word)
            parser.next()

        # Cluster Vector?
        if parser.current == '[':
            result.cluster_vector = ClusterVector.parse(parser)

        # Answers?
        if parser.current == '{':
            parser.next()
            answers = []

            while parser.current != '}':
                word = parser.as_word()
                if word is None:
                    raise parser.error("Specific words required in '{answers}'")
                answers.append(word)
                parser.next()

                if parser.current != '}':
                    parser.require(',')

            # Without an identifier, this is the cluster of these answers
            if not had_identifier and answers:
                result.identifier = WordleTreeIdentifier.cluster(min(answers))

            result.answer_count = len(answers)
            result.answers = answers
            parser.next()

        if parser.current != '':
            raise parser.error("Unexpected content on line after end of WordleTree")

        return indent, result

    @staticmethod
    def _parse_response_identifier(parser: Parser, previous_guess: Optional[Word]) -> WordleTreeIdentifier:
        if previous_guess is None:
            raise parser.error("Response identifier needs a specific guess on the line above it")

        try:
            response = Response.from_knowns_str(parser.current)
        except ValueError:
            raise parser.error("Not a valid knowns pattern") from None

        # Known letters must be the guess's letters
        for known, letter in zip(parser.current, str(previous_guess)):
            if known not in '._' and known.lower() != letter:
                raise parser.error(f"Knowns don't match guess '{previous_guess}'")

        return WordleTreeIdentifier.from_response(previous_guess, response)


def _child_order(child: WordleTree):
    # Identifier descending: negate each part of its key
    identifier = tuple(-part for part in child.identifier._key())
    return (-child.answer_count, child.next_guess._key(), identifier)
