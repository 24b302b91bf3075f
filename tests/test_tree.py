import itertools

import pytest
from bitarray import bitarray

from huffcomp.errors import InternalError
from huffcomp.tree import (Fork, HuffmanTree, Leaf, build_full_tree, calc_freq,
                           format_tree, make_code)

SAMPLES = [
    "aaabbc",
    "abracadabra",
    "the quick brown fox jumps over the lazy dog",
    "Grüße aus Köln, 世界 😀😀😀",
    "".join(chr(c) for c in range(32, 300)),
]


def test_calc_freq():
    assert calc_freq("aaabbc") == {'a': 3, 'b': 2, 'c': 1}
    assert calc_freq("é😀é") == {'é': 2, '😀': 1}


def test_build_tree_aaabbc():
    tree = build_full_tree({'a': 3, 'b': 2, 'c': 1})
    # c+b merge first; a (leaf) is popped before the equal-weight fork
    assert tree.root == Fork(Leaf('a', 3), Fork(Leaf('c', 1), Leaf('b', 2), 3), 6)


def test_make_code_aaabbc():
    coding = make_code(build_full_tree(calc_freq("aaabbc")))
    assert coding == {'a': bitarray('0'), 'c': bitarray('10'), 'b': bitarray('11')}


def test_single_symbol_tree():
    tree = build_full_tree({'x': 5})
    assert tree.root == Leaf('x', 5)
    assert make_code(tree) == {'x': bitarray('0')}


def test_empty_table_rejected():
    with pytest.raises(ValueError):
        build_full_tree({})


def test_tie_break_by_code_point():
    tree = build_full_tree({'b': 1, 'a': 1})
    assert tree.root == Fork(Leaf('a', 1), Leaf('b', 1), 2)


def test_tie_break_leaf_before_fork():
    tree = build_full_tree({'a': 1, 'b': 1, 'c': 2})
    assert tree.root == Fork(Leaf('c', 2), Fork(Leaf('a', 1), Leaf('b', 1), 2), 4)


def test_tree_independent_of_table_order():
    freq = calc_freq("mississippi river banks")
    shuffled = dict(reversed(list(freq.items())))
    assert build_full_tree(freq) == build_full_tree(shuffled)
    assert make_code(build_full_tree(freq)) == make_code(build_full_tree(shuffled))


@pytest.mark.parametrize("text", SAMPLES)
def test_codes_are_prefix_free(text):
    codes = [code.to01() for code in make_code(build_full_tree(calc_freq(text))).values()]
    assert len(codes) == len(set(text))
    for a, b in itertools.permutations(codes, 2):
        assert not b.startswith(a)


def test_code_lengths_are_optimal():
    freq = {'a': 45, 'b': 13, 'c': 12, 'd': 16, 'e': 9, 'f': 5}
    coding = make_code(build_full_tree(freq))
    assert sum(freq[s] * len(code) for s, code in coding.items()) == 224


def test_missing_child_is_internal_error():
    tree = HuffmanTree(Fork(Leaf('a', 1), Fork(Leaf('b', 1), None, 1), 2))
    with pytest.raises(InternalError):
        make_code(tree)


def test_format_tree():
    tree = build_full_tree(calc_freq("aaabbc"))
    assert format_tree(tree) == "\n".join([
        "[6]",
        "|  [a, 3]",
        "|  [3]",
        "|  |  [c, 1]",
        "|  |  [b, 2]",
    ])


def test_format_tree_escapes_control_characters():
    tree = build_full_tree({'\n': 2, '\r': 1})
    assert format_tree(tree) == "[3]\n|  [\\r, 1]\n|  [\\n, 2]"
