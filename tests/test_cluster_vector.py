from wordle_solver.bit_set import BitSet
from wordle_solver.cluster_vector import ClusterVector
from wordle_solver.parser import Parser


def test_add():
    cv = ClusterVector()
    cv.add(1)
    cv.add(3)
    cv.add(1)
    assert cv.value == [2, 0, 1]
    assert cv.cluster_count() == 3
    assert cv.word_count() == 5
    assert cv.biggest_cluster() == 3

    cv.clear()
    assert cv.value == []
    assert cv.to_string() == ""


def test_from_map_and_counts():
    assert ClusterVector.from_map({'a': [1], 'b': [1, 2], 'c': [3]}).value == [2, 1]
    assert ClusterVector.from_counts({'a': 4, 'b': 1}).value == [1, 0, 0, 1]
    assert ClusterVector.from_bits([(None, BitSet.from_indices([0, 1])), (None, BitSet.from_indices([4]))]).value == [1, 1]


def test_total_turns():
    cv = ClusterVector([2, 2])

    # 1 + 1 + (1 + 2) + (1 + 2)
    assert cv.total_turns_ideal() == 8

    # Pairs take 1 + 2 with nothing learned
    assert cv.total_turns_pessimistic() == 8

    # 1 + 1 + 3 + 3
    assert cv.total_turns_predicted() == 8

    # A triple is 5.5 and a quad 8: 5.5 + 8 = 13.5
    assert ClusterVector([0, 0, 1, 1]).total_turns_predicted() == 13
    assert ClusterVector([0, 0, 1, 1]).total_turns_pessimistic() == 6 + 10


def test_to_string():
    assert ClusterVector([10, 4]).to_string() == "[10, 4]"
    assert str(ClusterVector([2, 0, 0, 1])) == "[2, 0, 0, 1]"

    # Biggest cluster shown when beyond the first five
    assert ClusterVector([3, 2, 1, 0, 0, 0, 1]).to_string() == "[3, 2, 1, 0, 0 .. ^7]"

    # Total cluster count shown when there are many
    cv = ClusterVector([36, 15, 17, 11, 3, 7, 3, 5, 3, 3, 3, 1])
    assert cv.to_string() == "[36, 15, 17, 11, 3 .. ^12 ∑107]"
    assert ClusterVector([20, 5]).to_string() == "[20, 5 .. ∑25]"

    # .. but not when every cluster is a single
    assert ClusterVector([30]).to_string() == "[30]"


def test_parse():
    parser = Parser("[10, 4]")
    assert ClusterVector.parse(parser) == ClusterVector([10, 4])
    assert parser.current == ""

    parser = Parser("[]")
    assert ClusterVector.parse(parser) == ClusterVector([])

    # Summarized vectors can't be rebuilt
    parser = Parser("[1, 2, 3, 4, 5 .. +64 ^128 ∑79] {fatal}")
    assert ClusterVector.parse(parser) is None
    assert parser.current == "{"


def test_round_trip():
    cv = ClusterVector([4, 1, 0, 2])
    assert ClusterVector.parse(Parser(cv.to_string())) == cv
