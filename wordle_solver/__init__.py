"""
Wordle Solver - Strategy Trees
==============================

Finds the guesses minimizing total turns to solve every answer, writes the
resulting strategy as a readable tree, and plays games from that tree.
"""

__version__ = "2.0.0"

from .word import Word, load_words, parse_lines
from .response import Constraint, Response, ResponseSet
from .bit_set import BitSet
from .cluster_vector import ClusterVector
from .parser import ParseError
from .wordle_tree import WordleTree, WordleTreeIdentifier, WordleGuess, WordleTreeToStringOptions
from .clubs import Clubs
from .search import find_best, score_cluster_count
from .state import State
from .builders import build
from .tree_player import TreePlayer
from .benchmark import benchmark, print_results
