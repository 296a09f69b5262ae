"""Line-by-line tokenizer for the strategy tree and cluster vector text forms."""

from typing import Optional

from .word import Word


DELIMITERS = ' ,()[]{}'


class ParseError(ValueError):
    """Malformed text, reported with the 1-based line and column of the bad token."""

    def __init__(self, line_number: int, char_in_line: int, token: str, message: str):
        self.line_number = line_number
        self.char_in_line = char_in_line
        self.token = token
        super().__init__(f"@({line_number}, {char_in_line}) \"{token}\": {message}")


class Parser:
    """
    Splits text into tokens, one line at a time.

    Tokens are separated by spaces; each of ',', '(', ')', '[', ']', '{'
    and '}' is always a token by itself. 'current' holds the current token
    and 'char_in_line' its 1-based column.
    """

    def __init__(self, text: str):
        self.line_number = 0
        self.char_in_line = 0
        self.current = ''
        self.current_line = ''

        self._lines = text.splitlines()
        self._position = 0

        # Load the first line and token, if there are any
        try:
            self.next_line()
        except ParseError:
            pass

    def next_line(self):
        """Advance to the first token of the next non-blank line."""
        while True:
            self.line_number += 1
            self.char_in_line = 1
            self.current = ''
            self.current_line = ''
            self._position = 0

            if self.line_number > len(self._lines):
                raise self.error("Out of content when more expected.")

            self.current_line = self._lines[self.line_number - 1]
            if self.current_line.strip():
                break

        self.next()

    def next(self) -> str:
        line = self.current_line

        # Error to call next the second time when nothing is left on the line
        if self._position >= len(line) and self.current == '':
            raise self.error("Out of content when more expected.")

        # Advance position beyond previous token
        self.char_in_line += len(self.current)

        # Ignore any leading spaces
        while self._position < len(line) and line[self._position] == ' ':
            self.char_in_line += 1
            self._position += 1

        # Collect until a delimiter
        start = self._position
        while self._position < len(line):
            if line[self._position] in DELIMITERS:
                if self._position == start:
                    self._position += 1
                break
            self._position += 1

        self.current = line[start:self._position]
        return self.current

    def as_word(self) -> Optional[Word]:
        """The current token as a Word, or None for '*'."""
        if self.current == '*':
            return None
        try:
            return Word(self.current)
        except ValueError:
            raise self.error("Not a valid word or '*'") from None

    def as_float(self) -> float:
        try:
            return float(self.current)
        except ValueError:
            raise self.error("Not a valid floating point number") from None

    def as_int(self) -> int:
        if not self.current.isdigit():
            raise self.error("Not a valid number")
        return int(self.current)

    def require(self, expected: str):
        if self.current != expected:
            raise self.error(f"'{expected}' required here")
        self.next()

    def error(self, message: str) -> ParseError:
        return ParseError(self.line_number, self.char_in_line, self.current, message)
