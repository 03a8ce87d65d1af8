# Generate and print pseudo-random numbers
#   $ prng -s 1 -x xorshift128+ | head
#
# Prints an indefinite stream of values from one of the xorshift
# generators, one per line, until interrupted or until the output goes
# away. With -n the stream stops after that many values.
#
# This is free and unencumbered software released into the public domain.
import argparse
import dataclasses
import itertools
import logging
import os
import re
import sys
import time
from typing import Callable, Optional, TextIO

import xorshift

log = logging.getLogger(__name__)

DESCRIPTION = """\
Print an indefinite stream of pseudo-random numbers generated by an
Xorshift pseudo-random number generator (PRNG).

These generators are NOT suitable for cryptographic use.
"""

EPILOG = """\
algorithms:
    xorshift64*
    xorshift1024*
    xorshift4096*
    xorshift128+

    Default: xorshift1024*
"""

_SEED = re.compile(r"\s*\+?(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<oct>0[0-7]*)|(?P<dec>[1-9][0-9]*))")

class InvalidSeed(ValueError):
    """Raised when seed text is not a 64-bit unsigned integer."""
    pass

class SinkFailure(Exception):
    """Raised by drive() when the sink rejects a value."""
    pass

@dataclasses.dataclass(frozen=True)
class Config:
    seed: int
    algorithm: xorshift.Algorithm = xorshift.DEFAULT_ALGORITHM
    case: Optional[str] = None  # None for decimal, "x" or "X" for hex
    bits32: bool = False
    unbuffered: bool = False
    count: Optional[int] = None

def parse_seed(text: str) -> int:
    """Parse a seed the way strtoull(text, &end, 0) would, but strictly.

    Accepts decimal, 0x hexadecimal, and leading-zero octal.
    """
    m = _SEED.fullmatch(text)
    if not m:
        raise InvalidSeed(f"seed is not a number: {text}")
    if m["hex"] is not None:
        value = int(m["hex"], 16)
    elif m["oct"] is not None:
        value = int(m["oct"], 8)
    else:
        value = int(m["dec"], 10)
    if value > xorshift.MASK64:
        raise InvalidSeed(f"seed is out of range: {text}")
    return value

def formatter(case: Optional[str] = None, bits32: bool = False) -> Callable[[int], str]:
    """Return a function rendering one 64-bit value as text."""
    if bits32:
        mask, width = 0xffffffff, 8
    else:
        mask, width = xorshift.MASK64, 16
    if case is None:
        spec = "d"
    elif case in ("x", "X"):
        spec = f"0{width}{case}"
    else:
        raise ValueError(f"unknown hexadecimal case: {case}")
    return lambda value: format(value & mask, spec)

def writer(
    stream: TextIO,
    render: Callable[[int], str],
    flush: bool = False,
) -> Callable[[int], None]:
    """Return a sink writing one rendered value per line to stream."""
    def sink(value: int) -> None:
        stream.write(render(value) + "\n")
        if flush:
            stream.flush()
    return sink

def drive(
    generator: xorshift.Xorshift,
    sink: Callable[[int], None],
    count: Optional[int] = None,
) -> int:
    """Pull values from generator into sink, count of them or forever.

    The first OSError from the sink ends the loop and is raised as
    SinkFailure. The value being written at that point is lost, but the
    generator itself is untouched and can be driven again.
    """
    written = 0
    for value in itertools.islice(generator, count):
        try:
            sink(value)
        except OSError as e:
            raise SinkFailure(f"couldn't write value {written}: {e}") from e
        written += 1
    return written

def configure(args: argparse.Namespace) -> Config:
    """Build a Config from parsed arguments, raising ValueError on bad input."""
    algorithm = xorshift.Algorithm.select(args.algorithm)
    if args.seed is None:
        seed = int(time.time())
    else:
        seed = parse_seed(args.seed)
    if args.count is not None and args.count < 0:
        raise ValueError(f"count must not be negative: {args.count}")
    return Config(
        seed=seed,
        algorithm=algorithm,
        case=args.case,
        bits32=args.bits32,
        unbuffered=args.unbuffered,
        count=args.count,
    )

def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prng",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-s", dest="seed", metavar="SEED",
        help="set the generator's seed to the specified 64-bit integer "
             "(use the current time in seconds if omitted)")
    parser.add_argument(
        "-u", dest="unbuffered", action="store_true",
        help="disable standard output buffering")
    parser.add_argument(
        "-x", dest="case", action="store_const", const="x",
        help="print generated values in hexadecimal with lowercase "
             "letters instead of decimal")
    parser.add_argument(
        "-X", dest="case", action="store_const", const="X",
        help="print generated values in hexadecimal with uppercase "
             "letters instead of decimal")
    parser.add_argument(
        "-32", dest="bits32", action="store_true",
        help="print 32-bit values instead of 64-bit ones")
    parser.add_argument(
        "-n", dest="count", metavar="COUNT", type=int,
        help="stop after printing COUNT values")
    parser.add_argument(
        "-v", dest="verbose", action="store_true",
        help="log debugging information to standard error")
    parser.add_argument(
        "algorithm", nargs="?",
        help="the generator to use (default: xorshift1024*); it may "
             "come before or after the options")
    return parser

def _silence(stream: TextIO) -> None:
    """Point the file descriptor behind stream at os.devnull, if it has one."""
    try:
        fd = stream.fileno()
    except (OSError, ValueError):
        return  # not backed by a file
    devnull = os.open(os.devnull, os.O_WRONLY)
    try:
        os.dup2(devnull, fd)
    finally:
        os.close(devnull)

def main(argv=None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = configure(args)
    except ValueError as e:
        parser.error(str(e))

    log.debug("algorithm %s, seed %d", config.algorithm.value, config.seed)
    generator = config.algorithm.create(config.seed)
    render = formatter(config.case, config.bits32)
    stdout = sys.stdout
    sink = writer(stdout, render, flush=config.unbuffered)

    try:
        written = drive(generator, sink, config.count)
        try:
            stdout.flush()
        except OSError as e:
            raise SinkFailure(f"couldn't flush output: {e}") from e
    except SinkFailure as e:
        log.error("%s", e)
        if isinstance(e.__cause__, BrokenPipeError):
            # Keep the interpreter's final flush from failing again
            _silence(stdout)
        return 1
    except KeyboardInterrupt:
        log.debug("interrupted")
        return 0
    log.debug("wrote %d values", written)
    return 0

if __name__ == "__main__":
    sys.exit(main())
