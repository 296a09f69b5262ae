"""
Tree Player
===========

Plays games with a WordleTree: before each turn, find the subtree matching
the game so far and return its next guess. Tracks the turns each path
through the tree took, so observed turns can be shown on the tree.
"""

from typing import Dict, List, Optional, Tuple

from .formatting import pad_to_length, write_turns
from .response import Response
from .word import Word
from .wordle_tree import INDENT_WIDTH, WordleTree, WordleTreeToStringOptions


class TreePlayer:
    def __init__(self, tree: WordleTree):
        self.tree = tree
        self.current: Optional[WordleTree] = None

        self.game_count = 0
        self.last_turn = 0
        self.turn_counts: Dict[Tuple[int, ...], Tuple[int, int]] = {}
        self.path: List[int] = []

    def choose(self, guesses: List[Word], turn: int, answers_left: List[Word]) -> Optional[Word]:
        """
        Return the next guess in the current situation, or None to guess randomly.

        Args:
            guesses: Guesses played so far this game
            turn: The turn about to be played; 1 starts a new game
            answers_left: Answers still possible, alphabetically first at [0]
        """
        self._next_for_game(guesses, turn, answers_left)

        if self.current is None:
            return None
        return self.current.next_guess.word

    def _next_for_game(self, guesses: List[Word], turn: int, answers_left: List[Word]):
        # A new game: record turns to win the previous one and restart at the root
        if turn <= 1:
            self.current = self.tree
            if self.last_turn > 0:
                self._score()

            self.last_turn = 1
            self.game_count += 1
            return

        last_guess = guesses[turn - 2] if len(guesses) >= turn - 1 else None

        # Every answer left got the same response, so the first stands in for the real one
        last_response = None
        if last_guess is not None and answers_left:
            last_response = Response.score(last_guess, answers_left[0])

        if self.current is not None:
            # Look for the most specific matching child (Response > Cluster > Length > Any)
            best = None
            for i, child in enumerate(self.current.children()):
                if child.identifier.matches(last_guess, last_response, answers_left):
                    if best is None or child.identifier.is_more_specific(best[1].identifier):
                        best = (i, child)

                    if child.identifier.is_cluster():
                        break

            if best is not None:
                self.path.append(best[0])
                self.current = best[1]
            else:
                self.current = None

        self.last_turn = turn

    def clear_play_stats(self):
        """Clear statistics about games played with this TreePlayer."""
        self.game_count = 0
        self.last_turn = 0
        self.turn_counts.clear()
        self.path = []

    def cluster(self, word: Word, answers: List[Word], at_turn: int) -> List[Word]:
        """Find the cluster containing 'word' after the tree's specific guesses (before random guessing)."""
        turn = 1
        guesses = []
        answers_left = list(answers)

        guess = self.choose(guesses, turn, answers_left)
        while guess is not None:
            response = Response.score(guess, word)
            answers_left = [answer for answer in answers_left if Response.score(guess, answer) == response]
            guesses.append(guess)

            turn += 1
            if turn >= at_turn:
                break
            guess = self.choose(guesses, turn, answers_left)

        return answers_left

    def _score(self):
        # After each game, add its turns to the last node reached
        if self.last_turn > 0:
            path = tuple(self.path)
            self.path = []

            total, games = self.turn_counts.get(path, (0, 0))
            self.turn_counts[path] = (total + self.last_turn, games + 1)

            # Don't count the last game again on later calls
            self.last_turn = 0

    def total_turns(self, node: WordleTree, path: List[int]) -> Tuple[int, int]:
        """Return (total turns, games) for games which went through node."""
        self._score()

        total, games = self.turn_counts.get(tuple(path), (0, 0))
        for i, child in enumerate(node.children()):
            path.append(i)
            inner_total, inner_games = self.total_turns(child, path)
            path.pop()

            total += inner_total
            games += inner_games

        return total, games

    def to_string(self, options: Optional[WordleTreeToStringOptions] = None) -> str:
        """Write out the tree with the turns observed through each node."""
        if options is None:
            options = WordleTreeToStringOptions()
        result = []
        self._add_with_scores(self.tree, [], options, result)
        return ''.join(result)

    def _add_with_scores(self, node: WordleTree, path: List[int], options: WordleTreeToStringOptions, result: List[str]):
        total, games = self.total_turns(node, path)

        # Hide unvisited subtrees
        if total == 0 and not options.show_zero_turn_paths:
            return

        line = ' ' * (INDENT_WIDTH * len(path))
        start = len(line)

        if games == 0:
            line += '0'
        elif options.show_average_turns:
            line += write_turns(total, games, True)
        else:
            # Turns per pass through every answer in the tree, to compare with the tree's own totals
            cycle_count = self.game_count / self.tree.answer_count if self.tree.answer_count > 0 else 1.0
            line += write_turns(total / cycle_count, 1.0, False)

        line += ' '
        if node.outer_total_turns > 0:
            line = pad_to_length(line, start + 6)

        result.append(line + node.line_to_string(options, 0))

        # Children in tree order, so paths line up
        for i, child in enumerate(node.children()):
            path.append(i)
            self._add_with_scores(child, path, options, result)
            path.pop()
