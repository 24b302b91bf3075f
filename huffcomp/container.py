"""Compressed file layout.

All integers are unsigned big-endian::

    [8 bytes: tree_byte_length]
    [tree_byte_length bytes: serialized tree]
    [8 bytes: encoded_bit_count]
    [ceil(encoded_bit_count / 8) bytes: packed bitstream]
"""
import logging

from bitarray import bitarray

from huffcomp.bitstream import pack, unpack
from huffcomp.errors import FormatError, InputError
from huffcomp.tree import HuffmanTree, Leaf, build_full_tree, calc_freq, make_code
from huffcomp.treecodec import SURROGATES, serialize, unserialize

logger = logging.getLogger(__name__)

LENGTH_BYTES = 8


def _read_length(data: bytes, offset: int, field: str) -> tuple[int, int]:
    end = offset + LENGTH_BYTES
    if end > len(data):
        raise FormatError(f"container is truncated: missing {field}")
    return int.from_bytes(data[offset:end], 'big'), end

def compress_with_tree(text: str) -> tuple[HuffmanTree, bytes]:
    """Compress ``text`` and also return the tree its codes came from."""
    if not text:
        raise InputError("input is empty, nothing to compress")
    freq_stats = calc_freq(text)
    surrogates = sorted(s for s in freq_stats if ord(s) in SURROGATES)
    if surrogates:
        raise InputError(
            f"input holds lone surrogate {ord(surrogates[0]):#x}, not Unicode text")
    coding_tree = build_full_tree(freq_stats)
    coding = make_code(coding_tree)
    tree_bytes = serialize(coding_tree)
    payload, bit_count = pack(coding[symbol] for symbol in text)
    logger.debug("%d symbols (%d distinct) encoded in %d bits",
                 len(text), len(freq_stats), bit_count)
    return coding_tree, b''.join([
        len(tree_bytes).to_bytes(LENGTH_BYTES, 'big'),
        tree_bytes,
        bit_count.to_bytes(LENGTH_BYTES, 'big'),
        payload,
    ])

def compress(text: str) -> bytes:
    return compress_with_tree(text)[1]

def decompress(data: bytes) -> str:
    tree_length, offset = _read_length(data, 0, "tree length")
    if tree_length > len(data) - offset:
        raise FormatError(
            f"declared tree length {tree_length} exceeds the {len(data) - offset} bytes available")
    codetree = unserialize(data[offset:offset + tree_length])
    offset += tree_length
    bit_count, offset = _read_length(data, offset, "bit count")
    if bit_count == 0:
        raise FormatError("container holds no encoded symbols")
    return decode(unpack(data[offset:], bit_count), codetree)

def decode(source: bitarray, codetree: HuffmanTree) -> str:
    """Walk ``codetree`` once per bit, emitting a symbol at every leaf."""
    root = codetree.root
    if isinstance(root, Leaf):
        # Single-symbol tree: every symbol is the one-bit code 0
        if source.any():
            raise FormatError("unexpected 1 bit for a single-symbol tree")
        return root.symbol * len(source)

    result = []
    node = root
    for bit in source:
        node = node.right if bit else node.left
        if node is None:
            raise FormatError("tree fork is missing a child")
        if isinstance(node, Leaf):
            result.append(node.symbol)
            node = root
    if node is not root:
        raise FormatError("bitstream ends inside a code")
    return ''.join(result)
