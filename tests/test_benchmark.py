import importlib
import random

import pytest

benchmark_module = importlib.import_module('wordle_solver.benchmark')
from wordle_solver.benchmark import benchmark, play, print_results, strategy_options
from wordle_solver.bit_set import BitSet
from wordle_solver.builders import build
from wordle_solver.tree_player import TreePlayer
from wordle_solver.word import Word, wv
from wordle_solver.wordle_tree import WordleTree


FOLLY = "folly, holly, jolly, lowly, wooly"


def test_play():
    answers = wv(FOLLY)
    player = TreePlayer(build('first', answers, []))

    turns, guesses = play(player, w("jolly"), answers, random.Random(1))
    assert turns == 3
    assert guesses == wv("folly, holly, jolly")


def test_play_unsolved(monkeypatch):
    monkeypatch.setattr(benchmark_module, 'MAX_TURNS', 1)
    player = TreePlayer(WordleTree.parse("(*, 0) -> zzzzz"))

    with pytest.raises(RuntimeError):
        play(player, w("fatal"), wv("fatal, tally"), random.Random(1))


def test_benchmark():
    answers = wv(FOLLY)
    player = TreePlayer(build('first', answers, []))

    results = benchmark(player, answers, verbose=False)
    assert results['games'] == 5
    assert results['total_turns'] == 10
    assert results['average'] == 2.0
    assert results['distribution'] == {1: 1, 2: 3, 3: 1}
    assert results['over_limit'] == 0
    assert results['over_limit_words'] == []

    # Playing every answer matches the tree's own total
    assert results['predicted_turns'] == 10.0

    # Only some words
    results = benchmark(player, answers, test_words=wv("holly, jolly"), verbose=False)
    assert results['games'] == 2
    assert results['total_turns'] == 5
    assert results['predicted_turns'] is None


def test_benchmark_is_repeatable():
    answers = wv("booze, dodge, gouge, vogue, fatal, tally, waltz")
    tree = build('standard', answers, [])

    first = benchmark(TreePlayer(tree), answers, seed=3, verbose=False)
    second = benchmark(TreePlayer(tree), answers, seed=3, verbose=False)
    assert first['distribution'] == second['distribution']


def test_print_results(capsys):
    answers = wv(FOLLY)
    results = benchmark(TreePlayer(build('first', answers, [])), answers, verbose=False)
    print_results(results)

    out = capsys.readouterr().out
    assert "STRATEGY RESULTS" in out
    assert "Games played:  5" in out
    assert "Average turns: 2.0000" in out
    assert "Tree total:    10.0" in out
    assert "  2:     3 (60.00%) " in out


def test_strategy_options():
    # Only the best-turn search needs a bound
    assert strategy_options('best') == {'max_cluster_size': BitSet.CAPACITY}
    assert strategy_options('standard') == {}

    answers = wv(FOLLY)
    for strategy in ['best', 'standard', 'v11']:
        tree = build(strategy, answers, [], **strategy_options(strategy))
        assert tree.answer_count == 5

    # Clusters within the bound are still searched
    assert build('best', answers, [], **strategy_options('best')).outer_total_turns == 10.0


def w(text: str) -> Word:
    return Word(text)
