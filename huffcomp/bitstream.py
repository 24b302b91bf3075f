import logging
from typing import Iterable

from bitarray import bitarray

from huffcomp.errors import FormatError

logger = logging.getLogger(__name__)


def pack(codes: Iterable[bitarray | str]) -> tuple[bytes, int]:
    """Concatenate ``codes`` and pack them MSB-first into bytes.

    Returns the packed bytes and the exact number of bits written. The final
    byte is zero-padded, so the bit count is needed to tell padding from data.
    """
    result = bitarray(endian='big')
    for code in codes:
        result.extend(code)
    logger.debug("packed %d bits into %d bytes", len(result), (len(result) + 7) // 8)
    return result.tobytes(), len(result)

def unpack(payload: bytes, bit_count: int) -> bitarray:
    """Return exactly the first ``bit_count`` bits of ``payload``."""
    if bit_count < 0:
        raise ValueError(f"negative bit count: {bit_count}")
    if bit_count > 8 * len(payload):
        raise FormatError(
            f"bit count {bit_count} exceeds the {8 * len(payload)} bits of payload")
    if len(payload) > (bit_count + 7) // 8:
        raise FormatError(
            f"{len(payload)} payload bytes, expected {(bit_count + 7) // 8}")
    bits = bitarray(endian='big')
    bits.frombytes(payload)
    del bits[bit_count:]
    return bits
