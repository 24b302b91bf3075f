from huffcomp.container import compress, decompress
from huffcomp.errors import (ArgumentError, FormatError, HuffcompError,
                             InputError, InternalError)

__version__ = '1.0.0'

__all__ = [
    'compress',
    'decompress',
    'ArgumentError',
    'FormatError',
    'HuffcompError',
    'InputError',
    'InternalError',
]
