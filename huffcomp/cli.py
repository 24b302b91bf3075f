import argparse
import contextlib
import logging
import os
import sys
from dataclasses import dataclass

from huffcomp import __version__
from huffcomp.container import compress_with_tree, decompress
from huffcomp.errors import ArgumentError, HuffcompError, InputError, InternalError
from huffcomp.tree import format_tree

logger = logging.getLogger(__name__)

SUFFIX = '.huff'
TEXT_SUFFIX = '.txt'

EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERNAL = 3


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        raise ArgumentError(f"{message}\n{self.format_usage().rstrip()}")


@dataclass
class Config:
    mode: str
    filename: str
    verbose: bool = False
    print_tree: bool = False

    @classmethod
    def from_args(cls, argv: list[str] | None = None) -> 'Config':
        parser = _ArgumentParser(prog='huffcomp',
                                 description="Huffman coding based text compressor")
        mode = parser.add_mutually_exclusive_group(required=True)
        mode.add_argument('-c', '--compress', dest='mode', action='store_const',
                          const='compress', help=f"compress FILENAME into FILENAME{SUFFIX}")
        mode.add_argument('-d', '--decompress', dest='mode', action='store_const',
                          const='decompress',
                          help=f"decompress a {SUFFIX} file into <name>d{TEXT_SUFFIX}")
        parser.add_argument('-v', '--verbose', action='store_true',
                            help="report progress and compression statistics")
        parser.add_argument('--print-tree', action='store_true',
                            help="print the Huffman tree built while compressing")
        parser.add_argument('--version', action='version',
                            version=f'%(prog)s {__version__}')
        parser.add_argument('filename', type=str)
        args = parser.parse_args(argv)
        return cls(args.mode, args.filename, args.verbose, args.print_tree)


def compressed_path(filename: str) -> str:
    return f'{filename}{SUFFIX}'

def decompressed_path(filename: str) -> str:
    stem = filename[:-len(SUFFIX)]
    if stem.endswith(TEXT_SUFFIX):
        stem = stem[:-len(TEXT_SUFFIX)]
    return f'{stem}d{TEXT_SUFFIX}'

def read_source(filename: str) -> bytes:
    with open(filename, 'rb') as f:
        return f.read()

def read_text(filename: str) -> str:
    try:
        return read_source(filename).decode('utf-8')
    except UnicodeDecodeError as e:
        raise InputError(f"'{filename}' is not UTF-8 text: {e.reason} at byte {e.start}") from None

def write_output(filename: str, data: bytes):
    f = open(filename, 'wb')
    try:
        with f:
            f.write(data)
    except OSError:
        # Do not leave a truncated file that looks like a finished one
        with contextlib.suppress(OSError):
            os.remove(filename)
        raise

def log_stats(source_size: int, symbols: int, compressed_size: int):
    logger.info("original: %d bytes, compressed: %d bytes", source_size, compressed_size)
    logger.info("ratio: %.3f, bits/symbol: %.3f",
                compressed_size / source_size, compressed_size * 8 / symbols)

def compress_file(filename: str, print_tree: bool = False) -> str:
    logger.info("compressing '%s'", filename)
    source = read_text(filename)
    coding_tree, result = compress_with_tree(source)
    if print_tree:
        print(format_tree(coding_tree))
    output = compressed_path(filename)
    write_output(output, result)
    logger.info("compression finished, output file: %s", output)
    log_stats(len(source.encode('utf-8')), len(source), len(result))
    return output

def decompress_file(filename: str) -> str:
    if not filename.endswith(SUFFIX) or len(os.path.basename(filename)) <= len(SUFFIX):
        raise InputError(f"wrong file extension, only {SUFFIX} files can be decompressed")
    logger.info("decompressing '%s'", filename)
    result = decompress(read_source(filename)).encode('utf-8')
    output = decompressed_path(filename)
    write_output(output, result)
    logger.info("decompression finished, output file: %s", output)
    return output

def run(config: Config) -> str:
    if config.mode == 'decompress':
        if config.print_tree:
            logger.warning("--print-tree only applies when compressing")
        return decompress_file(config.filename)
    return compress_file(config.filename, print_tree=config.print_tree)

def main(argv: list[str] | None = None) -> int:
    try:
        config = Config.from_args(argv)
    except ArgumentError as e:
        print(f"huffcomp: {e}", file=sys.stderr)
        return EXIT_USAGE
    logging.basicConfig(level=logging.INFO if config.verbose else logging.WARNING,
                        format='%(levelname)s: %(message)s')
    try:
        run(config)
    except InternalError as e:
        logger.exception("internal error")
        print(f"huffcomp: internal error: {e}", file=sys.stderr)
        return EXIT_INTERNAL
    except (HuffcompError, OSError) as e:
        print(f"huffcomp: {e}", file=sys.stderr)
        return EXIT_FAILURE
    return 0
