import heapq
import itertools
import logging
from abc import ABC
from collections import Counter
from dataclasses import dataclass

from bitarray import bitarray

from huffcomp.errors import InternalError

logger = logging.getLogger(__name__)

# Shown escaped in tree dumps
_ESCAPES = {'\n': '\\n', '\r': '\\r', '\0': '\\0'}


class Node(ABC):
    pass

@dataclass
class Fork(Node):
    left: Node | None
    right: Node | None
    weight: int = 0

@dataclass
class Leaf(Node):
    symbol: str
    weight: int = 0

@dataclass
class HuffmanTree:
    root: Node


def calc_freq(text: str) -> dict[str, int]:
    return dict(Counter(text))

def concat_trees(left: Node, right: Node) -> Fork:
    return Fork(left, right, left.weight + right.weight)

def build_full_tree(freq_stats: dict[str, int]) -> HuffmanTree:
    """Merge the two lightest nodes until a single root remains.

    Ties on weight are broken by a sequence number: leaves are numbered in
    code point order, forks after them in the order they are created. The
    same frequency table therefore always yields the same tree.
    """
    if not freq_stats:
        raise ValueError("cannot build a tree from an empty frequency table")
    sequence = itertools.count()
    heap = [(freq, next(sequence), Leaf(symbol, freq))
            for symbol, freq in sorted(freq_stats.items())]
    heapq.heapify(heap)
    while len(heap) > 1:
        _, _, left = heapq.heappop(heap)
        _, _, right = heapq.heappop(heap)
        merged = concat_trees(left, right)
        heapq.heappush(heap, (merged.weight, next(sequence), merged))
    logger.debug("built tree over %d symbols, total weight %d",
                 len(freq_stats), heap[0][0])
    return HuffmanTree(heap[0][2])

def make_code(tree: HuffmanTree) -> dict[str, bitarray]:
    # A lone leaf would get an empty code, which the decoder could never consume
    match tree.root:
        case Leaf(symbol, _):
            return {symbol: bitarray('0')}
    coding = {}
    def traverse(node: Node, cur_code: bitarray):
        match node:
            case Fork(None, _, _) | Fork(_, None, _):
                raise InternalError(
                    f"fork at path '{cur_code.to01()}' is missing a child")
            case Fork(l, r, _):
                left_code = cur_code.copy()
                left_code.append(0)
                traverse(l, left_code)
                right_code = cur_code.copy()
                right_code.append(1)
                traverse(r, right_code)
            case Leaf(symbol, _):
                coding[symbol] = cur_code
            case _:
                raise InternalError(f"unexpected tree node: {node!r}")
    traverse(tree.root, bitarray())
    return coding

def format_tree(tree: HuffmanTree) -> str:
    lines = []
    def traverse(node: Node, depth: int):
        indent = '|  ' * depth
        match node:
            case Fork(l, r, w):
                lines.append(f'{indent}[{w}]')
                traverse(l, depth + 1)
                traverse(r, depth + 1)
            case Leaf(symbol, w):
                lines.append(f'{indent}[{_ESCAPES.get(symbol, symbol)}, {w}]')
    traverse(tree.root, 0)
    return '\n'.join(lines)
