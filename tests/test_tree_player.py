import random

import pytest

from wordle_solver.benchmark import play
from wordle_solver.builders import STRATEGIES, build
from wordle_solver.formatting import smart_trim
from wordle_solver.response import Response
from wordle_solver.tree_player import TreePlayer
from wordle_solver.word import Word, wv
from wordle_solver.wordle_tree import WordleTree, WordleTreeToStringOptions


SAMPLE_TREE = (
    "(*, 0) -> parse\n"
    "    (*, 0) -> clint\n"
    "        (= 3, 5) -> first\n"
    "        (fatal, 3) -> tally\n"
    "            (*, 2) -> waltz")

ANSWERS = ("parse, fatal, tally, waltz, clint, folly, holly, jolly, lowly, wooly, booze, dodge, gouge, vogue, "
           "begin, denim, given, vixen, widen, index, ennui, scamp, shack, smack, syrup, shrub, shrug, "
           "hardy, harry, karma, marry")


def test_player_all():
    tree = WordleTree.parse(SAMPLE_TREE)
    assert smart_trim(tree.to_string()) == smart_trim(SAMPLE_TREE)
    player = TreePlayer(tree)

    # Simulate a game
    guesses = []
    answers_left = wv("fatal, tally, waltz")
    assert player.choose(guesses, 1, answers_left) == w("parse")

    # parse; (*) -> clint
    assert player.choose(guesses, 2, answers_left) == w("clint")

    # clint; (fatal, 3) -> tally
    assert player.choose(guesses, 3, answers_left) == w("tally")

    # tally; (*) -> waltz
    assert player.choose(guesses, 4, answers_left) == w("waltz")

    # waltz has no children; random from here
    assert player.choose(guesses, 5, answers_left) is None
    assert player.choose(guesses, 6, answers_left) is None

    # A game which doesn't match the 'fatal' cluster
    answers_left = wv("other, tally, waltz")
    assert player.choose(guesses, 1, answers_left) == w("parse")
    assert player.choose(guesses, 2, answers_left) == w("clint")
    assert player.choose(guesses, 3, answers_left) == w("first")
    assert player.choose(guesses, 4, answers_left) is None

    # 6 turns down the 'waltz' path and 4 down the 'first' path, so 10 on their common ancestors
    assert smart_trim(player.to_string()) == (
        "10 (*, 0) -> parse\n"
        "    10 (*, 0) -> clint\n"
        "        4 (= 3, 5) -> first\n"
        "        6 (fatal, 3) -> tally\n"
        "            6 (*, 2) -> waltz")

    player.clear_play_stats()

    # Only the 'first' path game; the tally -> waltz path is hidden
    answers_left = wv("other, tally, waltz")
    assert player.choose(guesses, 1, answers_left) == w("parse")
    assert player.choose(guesses, 2, answers_left) == w("clint")
    assert player.choose(guesses, 3, answers_left) == w("first")
    assert player.choose(guesses, 4, answers_left) is None

    assert smart_trim(player.to_string()) == (
        "4 (*, 0) -> parse\n"
        "    4 (*, 0) -> clint\n"
        "        4 (= 3, 5) -> first")

    # Unvisited paths shown when asked
    text = smart_trim(player.to_string(WordleTreeToStringOptions(show_zero_turn_paths=True)))
    assert "0 (fatal, 3) -> tally" in text

    # tally is alone, since the tree goes down to a specific guess for it
    assert player.cluster(w("tally"), wv("fatal, tally, waltz"), 4) == [w("tally")]

    # parse and clint don't split the quad, and no child matches it after
    answers_left = wv("odder, order, ruder, udder")
    assert player.cluster(w("odder"), answers_left, 4) == answers_left


def test_total_turns():
    tree = WordleTree.parse(SAMPLE_TREE)
    player = TreePlayer(tree)

    answers_left = wv("fatal, tally, waltz")
    for turn in range(1, 5):
        player.choose([], turn, answers_left)

    # The game isn't counted until the next starts or totals are asked for
    assert player.total_turns(tree, []) == (4, 1)
    assert player.total_turns(tree.children()[0].children()[0], [0, 0]) == (0, 0)

    # Asking again doesn't count the game twice
    assert player.total_turns(tree, []) == (4, 1)


def test_average_turns():
    player = TreePlayer(WordleTree.parse(SAMPLE_TREE))
    for answers_left in [wv("fatal, tally, waltz"), wv("other, tally, waltz")]:
        for turn in range(1, 5):
            player.choose([], turn, answers_left)

    text = smart_trim(player.to_string(WordleTreeToStringOptions(show_average_turns=True)))
    assert text.splitlines()[0] == "4.000 (*, 0) -> parse"


def test_response_identifiers():
    tree = WordleTree.parse(
        "5 (fatal, 3) -> tally\n"
        "    2 (> tAL.., 1) -> waltz\n"
        "    2 (> tAl.., 1) -> fatal\n")
    player = TreePlayer(tree)

    assert player.choose([], 1, wv("fatal, tally, waltz")) == w("tally")

    # The previous guess and the response for the answers left pick the child
    assert player.choose([w("tally")], 2, wv("waltz")) == w("waltz")
    assert player.choose([], 1, wv("fatal, tally, waltz")) == w("tally")
    assert player.choose([w("tally")], 2, wv("fatal")) == w("fatal")

    # Without the previous guess, response children can't match
    assert player.choose([], 1, wv("fatal, tally, waltz")) == w("tally")
    assert player.choose([], 2, wv("fatal")) is None


@pytest.mark.parametrize("strategy", sorted(STRATEGIES))
def test_built_trees_solve_every_answer(strategy):
    answers = wv(ANSWERS)
    tree = build(strategy, answers, wv("clint"))
    player = TreePlayer(tree)
    rng = random.Random(7)

    for answer in answers:
        turns, guesses = play(player, answer, answers, rng)
        assert guesses[-1] == answer
        assert turns == len(guesses)

    # Every game went through the root
    total, games = player.total_turns(tree, [])
    assert games == len(answers)


@pytest.mark.parametrize("strategy", sorted(STRATEGIES))
def test_chosen_node_holds_answers_left(strategy):
    answers = wv(ANSWERS)
    tree = build(strategy, answers, wv("clint"))
    player = TreePlayer(tree)

    for answer in answers:
        guesses = []
        answers_left = list(answers)
        for turn in range(1, 10):
            guess = player.choose(guesses, turn, answers_left)

            # Any node reached lists every answer still possible, when it lists answers
            if player.current is not None and player.current.answers is not None:
                assert set(answers_left) <= set(player.current.answers)

            if guess is None:
                guess = answers_left[0]
            guesses.append(guess)
            if guess == answer:
                break

            response = Response.score(guess, answer)
            answers_left = [a for a in answers_left if a != guess and Response.score(guess, a) == response]

        assert guesses[-1] == answer


def test_deterministic_tree_turns_match_play():
    # With a specific guess or a single answer everywhere, play takes exactly the tree's turns
    answers = wv("folly, holly, jolly, lowly, wooly")
    tree = build('first', answers, [])
    player = TreePlayer(tree)
    rng = random.Random(1)

    total = sum(play(player, answer, answers, rng)[0] for answer in answers)
    assert total == tree.outer_total_turns == 10


def w(text: str) -> Word:
    return Word(text)
