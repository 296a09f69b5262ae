"""
Strategy Benchmark
==================

Plays every answer through a strategy tree with a TreePlayer, guessing
randomly in-cluster wherever the tree does, and reports how many turns each
game took. The TreePlayer keeps the turns taken on each path, so the
observed turns can be printed on the tree afterward.
"""

import os
import random
import sys
import time
from collections import Counter
from typing import Dict, List, Optional, Tuple

from .bit_set import BitSet
from .builders import STRATEGIES, build
from .response import Response
from .tree_player import TreePlayer
from .word import Word, load_words


MAX_TURNS = 100
PROGRESS_EVERY = 500  # games between verbose progress lines
WIN_TURNS = 6


def strategy_options(strategy: str) -> Dict:
    """Keyword options for build(); the 'best' search only runs on clusters a BitSet holds."""
    if strategy == 'best':
        return {'max_cluster_size': BitSet.CAPACITY}
    return {}


def play(player: TreePlayer, answer: Word, answers: List[Word], rng: random.Random) -> Tuple[int, List[Word]]:
    """
    Play one game for 'answer', using the tree's guess when it has one.

    Returns:
        (turns to solve, guesses played)
    """
    guesses = []
    answers_left = sorted(answers)

    for turn in range(1, MAX_TURNS + 1):
        guess = player.choose(guesses, turn, answers_left)
        if guess is None:
            guess = rng.choice(answers_left)

        guesses.append(guess)
        if guess == answer:
            return turn, guesses

        # Keep only the answers which would have given the same tiles
        response = Response.score(guess, answer)
        answers_left = [other for other in answers_left
                        if other != guess and Response.score(guess, other) == response]

    raise RuntimeError(f"'{answer}' not solved in {MAX_TURNS} turns")


def benchmark(player: TreePlayer, answers: List[Word], test_words: Optional[List[Word]] = None,
              seed: int = 42, verbose: bool = True) -> Dict:
    """
    Play a strategy tree against a set of answers.

    Args:
        player: TreePlayer for the tree to play
        answers: All possible answers
        test_words: Answers to play (default: all answers)
        seed: Seed for random in-cluster guesses
        verbose: Print progress

    Returns:
        Dict with 'games', 'total_turns', 'average', 'predicted_turns' (the
        tree's own total, when every answer was played), 'distribution'
        (turns -> games), 'over_limit' and 'over_limit_words' (games over
        six turns), 'time' and 'rate'
    """
    playing_all = test_words is None
    if playing_all:
        test_words = answers

    rng = random.Random(seed)
    turn_counts = Counter()
    total_turns = 0
    over_limit = []

    start = time.time()
    for games, answer in enumerate(test_words):
        if verbose and games > 0 and games % PROGRESS_EVERY == 0:
            elapsed = time.time() - start
            print(f"  [{games}/{len(test_words)}] {games / elapsed:.1f} games/s, "
                  f"avg={total_turns / games:.4f}")

        turns, _ = play(player, answer, answers, rng)
        turn_counts[turns] += 1
        total_turns += turns
        if turns > WIN_TURNS:
            over_limit.append(answer)

    elapsed = time.time() - start
    games = len(test_words)

    return {
        'games': games,
        'total_turns': total_turns,
        'average': total_turns / games if games else 0.0,
        'predicted_turns': player.tree.outer_total_turns if playing_all else None,
        'distribution': dict(sorted(turn_counts.items())),
        'over_limit': len(over_limit),
        'over_limit_words': [str(answer) for answer in over_limit[:20]],
        'time': elapsed,
        'rate': games / elapsed if elapsed > 0 else 0.0,
    }


def print_results(results: Dict):
    """Print benchmark results with a turn histogram."""
    games = results['games']

    print("\n" + "=" * 50)
    print("STRATEGY RESULTS")
    print("=" * 50)
    print(f"Games played:  {games}")
    print(f"Total turns:   {results['total_turns']}")
    if results['predicted_turns']:
        print(f"Tree total:    {results['predicted_turns']:.1f}")
    print(f"Average turns: {results['average']:.4f}")
    if games:
        print(f"Over {WIN_TURNS} turns:  {results['over_limit']} ({100 * results['over_limit'] / games:.2f}%)")
    print(f"Time: {results['time']:.1f}s ({results['rate']:.1f} games/sec)")

    print("\nTurns:")
    for turns, count in results['distribution'].items():
        share = 100 * count / games
        print(f"  {turns}: {count:5d} ({share:5.2f}%) {'█' * int(share / 2)}")

    if results['over_limit_words']:
        print(f"\nOver {WIN_TURNS} turns: {', '.join(results['over_limit_words'])}")
    print("=" * 50)


# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    strategy = sys.argv[1] if len(sys.argv) > 1 else "v11"
    if strategy not in STRATEGIES:
        sys.exit(f"Unknown strategy '{strategy}'; choose from: {', '.join(sorted(STRATEGIES))}")

    words_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "words")
    answers = load_words(os.path.join(words_dir, "answers.txt"))
    valid = load_words(os.path.join(words_dir, "allowed_guesses.txt"))
    print(f"Loaded {len(answers)} answers, {len(valid)} allowed guesses")

    print(f"\n--- Building '{strategy}' tree ---")
    tree = build(strategy, answers, [], valid, verbose=True, **strategy_options(strategy))
    print(tree.to_string())

    player = TreePlayer(tree)
    print_results(benchmark(player, answers, verbose=True))

    print("\n--- Observed turns per branch ---")
    print(player.to_string())
