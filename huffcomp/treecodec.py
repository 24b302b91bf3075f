"""Self-describing byte encoding of a Huffman tree.

The tree is written in preorder, one bit per node: ``0`` for a fork (followed
by its left and then its right subtree) and ``1`` for a leaf (followed by the
leaf's code point as a 21-bit big-endian integer). The bits are packed
MSB-first and the last byte is zero-padded.
"""
import logging

from bitarray import bitarray
from bitarray.util import ba2int, int2ba

from huffcomp.errors import FormatError, InternalError
from huffcomp.tree import Fork, HuffmanTree, Leaf, Node

logger = logging.getLogger(__name__)

SYMBOL_BITS = 21
MAX_CODE_POINT = 0x10FFFF
SURROGATES = range(0xD800, 0xE000)


def serialize(tree: HuffmanTree) -> bytes:
    result = bitarray(endian='big')
    def traverse(node: Node, tree_code: bitarray):
        match node:
            case Leaf(symbol, _):
                tree_code.append(1)
                tree_code += int2ba(ord(symbol), length=SYMBOL_BITS, endian='big')
            case Fork(l, r, _) if l is not None and r is not None:
                tree_code.append(0)
                traverse(l, tree_code)
                traverse(r, tree_code)
            case _:
                raise InternalError(f"cannot serialize tree node: {node!r}")
    traverse(tree.root, result)
    logger.debug("serialized tree into %d bits", len(result))
    return result.tobytes()

def unserialize(data: bytes) -> HuffmanTree:
    if not data:
        raise FormatError("serialized tree is empty")
    tree_code = bitarray(endian='big')
    tree_code.frombytes(data)
    # reverse for more efficient pop()'s
    tree_code.reverse()

    root = None
    # Forks whose children are not all read yet, innermost last
    pending: list[Fork] = []
    try:
        while True:
            if tree_code.pop():
                symbol_bits = tree_code[:-(SYMBOL_BITS + 1):-1]
                if len(symbol_bits) < SYMBOL_BITS:
                    raise FormatError("serialized tree is truncated inside a leaf symbol")
                del tree_code[-SYMBOL_BITS:]
                code_point = ba2int(symbol_bits)
                if code_point > MAX_CODE_POINT or code_point in SURROGATES:
                    raise FormatError(f"leaf symbol {code_point:#x} is not a Unicode scalar value")
                node = Leaf(chr(code_point))
            else:
                node = Fork(None, None)

            if root is None:
                root = node
            else:
                parent = pending[-1]
                if parent.left is None:
                    parent.left = node
                else:
                    parent.right = node
                    pending.pop()

            if isinstance(node, Fork):
                pending.append(node)
            if not pending:
                break
    except IndexError:
        raise FormatError("serialized tree is truncated: a fork is missing a child") from None

    # Only the zero padding of the final byte may follow
    if len(tree_code) >= 8 or tree_code.any():
        raise FormatError("unexpected data after serialized tree")
    return HuffmanTree(root)
