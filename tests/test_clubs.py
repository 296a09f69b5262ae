import pytest

from wordle_solver.bit_set import BitSet
from wordle_solver.clubs import Clubs
from wordle_solver.response import ALL_GREEN, Response
from wordle_solver.word import Word, wv
from wordle_solver.wordle_tree import WordleGuess, WordleTree, WordleTreeIdentifier


SEVEN = "ennui, begin, denim, given, vixen, widen, index"


def test_split():
    clubs = Clubs(wv("blush, slosh, slush, flush, gloss, floss"), [])

    # Only answers within are split, and the guess itself isn't in a cluster
    assert split_to_string(clubs, w("blush"), BitSet.from_indices([0, 1, 2])) == ".L.SH: [slosh]; .LUSH: [slush]"

    assert split_to_string(clubs, w("blush"), clubs.all_vector()) == ".L.S.: [gloss, floss]; .L.SH: [slosh]; .LUSH: [slush, flush]"

    # FLOSS S5 is yellow for S1 words, since S4 was green and didn't use up S1
    assert split_to_string(clubs, w("floss"), clubs.all_vector()) == ".L.S.: [blush]; .L.Ss: [slush]; .LOSs: [slosh]; .LOSS: [gloss]; FL.S.: [flush]"

    # FLOSS S4 is green for every other word, so no yellows
    assert try_yellows(clubs, w("floss"), 3) == ""


def test_yellows_for():
    clubs = Clubs(wv("gnome, nudge, undue, venue"), [])

    # Not repeated (N2): gnome, undue are green
    assert try_yellows(clubs, w("undue"), 1) == "nudge, venue"

    # First of a letter (U1): undue green, venue's U is green for the second copy, gnome has none
    assert try_yellows(clubs, w("undue"), 0) == "nudge"

    # Second of a letter (U4): nudge's only U was taken by the U1 yellow
    assert try_yellows(clubs, w("undue"), 3) == ""

    clubs = Clubs(wv("tepee, reset, exert, trees, exist"), [])

    # First of three (E2)
    assert try_yellows(clubs, w("tepee"), 1) == "exert, trees, exist"

    # Second of three (E4): exist has no E left; trees E4 is green
    assert try_yellows(clubs, w("tepee"), 3) == "exert"

    # Third of three (E5): no answer has three unmatched
    assert try_yellows(clubs, w("tepee"), 4) == ""

    # FLOSS S5 is the second S, but S4 is green, so one other S is enough
    clubs = Clubs(wv("blush, slosh, slush, flush, gloss, floss"), [])
    assert try_yellows(clubs, w("floss"), 4) == "slosh, slush"


@pytest.mark.parametrize("guess", wv("blush, floss, sassy, esses, crane, lolly, sissy"))
def test_split_is_exact_partition(guess):
    answers = wv("blush, slosh, slush, flush, gloss, floss, sassy, sissy, lolly, esses")
    clubs = Clubs(answers, [])
    within = clubs.all_vector()

    union = BitSet()
    for response, cluster in clubs.split(guess, within):
        assert response.value != ALL_GREEN
        assert (union & cluster).count() == 0
        union.union_with(cluster)

        # Every answer in a cluster gets that cluster's response
        for answer in clubs.cluster_to_words(cluster):
            assert response == Response.score(guess, answer)

    if guess in answers:
        union.add(answers.index(guess))
    assert union == within


def test_club_basics():
    words = wv(SEVEN)
    clubs = Clubs(words, words)
    within = clubs.all_vector()

    # begin: [2, 2] is 1 + 1 + (1 + 2) + (1 + 2) = 8 turns after it
    assert clubs.cluster_vector(within, w("begin")).to_string() == "[2, 2]"
    assert clubs.count_ideal_turns(within, w("begin")) == 7 + 8

    # ennui: [2, 0, 0, 1] is 1 + 1 + (1 + 2 + 2 + 2) = 9 turns
    assert clubs.cluster_vector(within, w("ennui")).to_string() == "[2, 0, 0, 1]"
    assert clubs.count_ideal_turns(within, w("ennui")) == 7 + 9

    # vixen: [4, 1] is 1 + 1 + 1 + 1 + (1 + 2) = 7 turns
    assert clubs.cluster_vector(within, w("vixen")).to_string() == "[4, 1]"
    assert clubs.count_ideal_turns(within, w("vixen")) == 7 + 7

    # index splits everything else: 6 turns
    assert clubs.cluster_vector(within, w("index")).to_string() == "[6]"
    assert clubs.count_ideal_turns(within, w("index")) == 7 + 6

    # dumbo (not an answer): [3, 2] is 1 + 1 + 1 + (1 + 2) + (1 + 2) = 9 turns
    assert clubs.cluster_vector(within, w("dumbo")).to_string() == "[3, 2]"
    assert clubs.count_ideal_turns(within, w("dumbo")) == 7 + 9

    assert clubs.best_next_guess(within) == (w("index"), 7 + 6)

    assert clubs.print_in_cluster(within) == (
        "ennui  16  [2, 0, 0, 1]\n"
        "begin  15  [2, 2]\n"
        "denim  15  [2, 2]\n"
        "given  14  [4, 1]\n"
        "vixen  14  [4, 1]\n"
        "widen  14  [4, 1]\n"
        "index  13  [6]\n")

    # Within [begin, denim, given], any guess tells the other two apart
    within = BitSet.new_all(4)
    within.remove(0)
    assert clubs.count_ideal_turns(within, w("denim")) == 5
    assert clubs.best_next_guess(within) == (None, 5)
    assert clubs.print_in_cluster(within) == (
        "begin  5  [2]\n"
        "denim  5  [2]\n"
        "given  5  [2]\n")


def test_vector_to_string():
    clubs = Clubs(wv(SEVEN), [])
    assert clubs.vector_to_string(clubs.all_vector()) == "[*]"
    assert clubs.vector_to_string(BitSet.from_indices([1, 6])) == "[begin, index]"


def test_best_next_guess():
    # Safe triple: which guess doesn't matter
    assert best_next_guess("begin, denim, given", []) == (None, 5)

    # Unsafe triple: widen can't tell vixen from given
    assert best_next_guess("given, vixen, widen", []) == (w("given"), 5)

    # Terrible triple: no guess tells any apart
    assert best_next_guess("aaaaa, bbbbb, ccccc", []) == (None, 6)

    valid = wv("aaaaa, bbbbb, ccccc, ddddd, eeeee, abcde")

    # An out-of-cluster guess can never beat 1 + 2 + 3 for a triple
    assert best_next_guess("aaaaa, bbbbb, ccccc", valid) == (None, 6)

    # Terrible five: the out-of-cluster guess is found
    assert best_next_guess("aaaaa, bbbbb, ccccc, ddddd, eeeee", valid) == (w("abcde"), 10)


def test_best_next_guess_empty():
    clubs = Clubs(wv(SEVEN), [])
    with pytest.raises(ValueError):
        clubs.best_next_guess(BitSet())


def test_count_random_turns():
    # Safe triple: (1 + 2 + 2) for each guess
    assert random_turns("begin, denim, given") == pytest.approx(5.0)

    # given = 5, vixen = 5, widen = 6
    assert random_turns("given, vixen, widen") == pytest.approx(16.0 / 3.0)

    # Terrible triple: (1 + 2 + 3) for each guess
    assert random_turns("aaaaa, bbbbb, ccccc") == pytest.approx(6.0)

    # Safe quad: (1 + 2 + 2 + 2)
    assert random_turns("gnome, nudge, undue, venue") == pytest.approx(7.0)

    # dodge, gouge and vogue split the rest into singles (7); booze leaves all three together (9)
    assert random_turns("booze, dodge, gouge, vogue") == pytest.approx(7.5)


def test_count_random_turns_after():
    words = wv("booze, dodge, gouge, vogue")
    clubs = Clubs(words, [])
    within = clubs.all_vector()

    # booze leaves one triple where every guess splits the others
    assert clubs.count_random_turns_after(within, w("booze")) == pytest.approx(4 + 5.0)
    assert clubs.count_random_turns_after(within, w("dodge")) == pytest.approx(4 + 3.0)

    cache = {}
    assert clubs.count_random_turns_after_cache(within, w("booze"), cache) == pytest.approx(9.0)
    assert len(cache) == 1
    assert clubs.count_random_turns_after_cache(within, w("booze"), cache) == pytest.approx(9.0)


def test_count_best_turns():
    # Safe triple: no choice recorded
    tree = run_best_turns("begin, denim, given", [])
    assert tree.outer_total_turns == 5.0
    assert tree.next_guess == WordleGuess.RANDOM

    tree = run_best_turns("aaaaa, bbbbb, ccccc", [])
    assert tree.outer_total_turns == 6.0

    tree = run_best_turns("given, vixen, widen", [])
    assert tree.outer_total_turns == 5.0
    assert tree.next_guess == WordleGuess.specific(w("given"))

    # folly 1, then holly 2 -> jolly 3, lowly 2, wooly 2
    tree = run_best_turns("folly, holly, jolly, lowly, wooly", [])
    assert tree.outer_total_turns == 10.0
    assert tree.next_guess == WordleGuess.specific(w("folly"))

    tree = run_best_turns("bulky, bully, dolly, dully, folly, fully, ghoul, godly, golly, gully, holly, jolly, lobby, lowly, mogul, moldy, oddly, wooly, would", [])
    assert tree.outer_total_turns == 43.0
    assert tree.next_guess == WordleGuess.specific(w("godly"))
    assert any(child.next_guess == WordleGuess.specific(w("folly")) for child in tree.children())


def test_count_best_turns_bounds():
    words = wv("bulky, bully, dolly, dully, folly, fully, ghoul, godly, golly, gully, holly, jolly")
    clubs = Clubs(words, words)
    within = clubs.all_vector()

    best = clubs.count_best_turns(within, {})
    for guess in words:
        after = clubs.count_best_turns_after(within, guess, {})
        assert best <= after
        assert after >= clubs.count_ideal_turns(within, guess)
    assert best >= 2 * within.count() - 1

    # One and two answers always take 1 and 1 + 2 turns
    assert clubs.count_best_turns(BitSet.from_indices([3]), {}) == 1
    assert clubs.count_best_turns(BitSet.from_indices([3, 7]), {}) == 3


def test_best_strategy():
    words = wv("folly, holly, jolly, lowly, wooly")
    clubs = Clubs(words, [])
    within = clubs.all_vector()
    choices = {}
    clubs.count_best_turns(within, choices)

    # Small clusters are left out unless show_all
    sentinel = WordleTree.new_sentinel()
    clubs.best_strategy(within, choices, False, sentinel)
    root = sentinel.take_first_child()
    assert root.identifier == WordleTreeIdentifier.cluster(w("folly"))
    assert root.answer_count == 5
    assert root.answers == words
    assert root.subtree is None

    sentinel = WordleTree.new_sentinel()
    clubs.best_strategy(within, choices, True, sentinel)
    root = sentinel.take_first_child()
    assert root.answer_count == 5
    assert sum(child.answer_count for child in root.subtree) == 4

    # Children aren't rolled up into the root
    assert root.outer_total_turns == 10.0


def best_next_guess(words: str, valid):
    clubs = Clubs(wv(words), valid)
    return clubs.best_next_guess(clubs.all_vector())


def random_turns(words: str) -> float:
    clubs = Clubs(wv(words), [])
    return clubs.count_random_turns(clubs.all_vector())


def run_best_turns(words: str, valid) -> WordleTree:
    clubs = Clubs(wv(words), valid)

    choices = {}
    outer_turns = clubs.count_best_turns(clubs.all_vector(), choices)

    sentinel = WordleTree.new_sentinel()
    clubs.best_strategy(clubs.all_vector(), choices, False, sentinel)

    root = sentinel.take_first_child()
    root.outer_total_turns = float(outer_turns)
    return root


def try_yellows(clubs: Clubs, guess: Word, letter_index: int) -> str:
    letter = guess.letter_at(letter_index)
    yellows = clubs.yellows_for(guess, letter, letter_index, clubs.all_vector())
    return ', '.join(str(answer) for answer in clubs.cluster_to_words(yellows))


def split_to_string(clubs: Clubs, guess: Word, within: BitSet) -> str:
    # <knowns>: [answer, answer]; ... sorted by response, answers in club order
    parts = []
    for response, cluster in sorted(clubs.split(guess, within), key=lambda pair: pair[0].value):
        answers = ', '.join(str(answer) for answer in clubs.cluster_to_words(cluster))
        parts.append(f"{response.to_knowns_string(guess)}: [{answers}]")
    return '; '.join(parts)


def w(text: str) -> Word:
    return Word(text)
