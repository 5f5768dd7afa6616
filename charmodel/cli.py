#!/usr/bin/env python3
"""
charmodel CLI
=============
Command-line interface for training a character model and generating text.

Usage:
    charmodel generate corpus.txt -w 3 -i "The" -n 200
    charmodel generate corpus.txt -w 3 -i "The" -n 200 --random
    charmodel dump corpus.txt -w 2
    charmodel stats corpus.txt -w 3 --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

# Add parent to path
_parent = Path(__file__).parent.parent
if str(_parent) not in sys.path:
    sys.path.insert(0, str(_parent))

from charmodel import __version__
from charmodel.config import config
from charmodel import settings

logger = logging.getLogger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def result(self, text: str):
        """Print command output; shown even in quiet mode."""
        print(text)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def table(self, headers: list, rows: list, col_widths: list = None):
        """Print a formatted table."""
        if self.quiet:
            return

        if not col_widths:
            col_widths = [max(len(str(h)), max((len(str(r[i])) for r in rows), default=0)) + 2
                         for i, h in enumerate(headers)]

        header_line = ''.join(str(h).ljust(w) for h, w in zip(headers, col_widths))
        print(header_line)
        print('-' * len(header_line))

        for row in rows:
            print(''.join(str(c).ljust(w) for c, w in zip(row, col_widths)))


def configure_logging(level: Optional[str] = None):
    """Set up root logging from --log-level, CHARMODEL_LOG_LEVEL or app.yaml."""
    level = level or config().log_level or settings.log_level()
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=settings.log_format(),
    )


def resolve_corpus(args) -> str:
    if args.corpus:
        return args.corpus
    cfg = config()
    if not cfg.has_corpus:
        raise ValueError("No corpus given (pass CORPUS or set CHARMODEL_CORPUS)")
    return cfg.corpus_path


def resolve_seed(args):
    """--random beats --seed, which beats CHARMODEL_SEED, which beats app.yaml."""
    if getattr(args, 'random', False):
        return None
    if getattr(args, 'seed', None) is not None:
        return args.seed
    cfg = config()
    if cfg.has_seed:
        return cfg.seed
    return settings.fixed_seed()


def resolve_window(args) -> int:
    if args.window is not None:
        return args.window
    return settings.window_length()


def build_model(args, seed=None):
    """Construct and train a model from parsed arguments."""
    from charmodel import LanguageModel

    model = LanguageModel(resolve_window(args), seed=seed)
    model.train_file(resolve_corpus(args), encoding=args.encoding)
    return model


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Train on the corpus and print generated text."""
    seed = resolve_seed(args)
    length = args.length if args.length is not None else settings.target_length()
    out.print(f"Training order-{resolve_window(args)} model "
              f"({'random' if seed is None else f'seed {seed}'})...", file=sys.stderr)
    model = build_model(args, seed=seed)
    out.result(model.generate(args.initial, length))
    return 0


def cmd_dump(args, out: Output):
    """Print the context table."""
    model = build_model(args)
    out.result(model.dump().rstrip('\n'))
    return 0


def cmd_stats(args, out: Output):
    """Print model statistics."""
    model = build_model(args)
    stats = model.stats()

    if args.json:
        out.result(json.dumps(stats.to_dict(), indent=2))
        return 0

    out.table(
        ['Metric', 'Value'],
        [
            ['Window length', stats.window_length],
            ['Contexts', stats.contexts],
            ['Observations', stats.observations],
            ['Distinct chars', stats.distinct_chars],
        ],
    )
    return 0


# =============================================================================
# Main
# =============================================================================

def _add_model_args(p):
    p.add_argument('corpus', nargs='?', help='Corpus file (default: CHARMODEL_CORPUS)')
    p.add_argument('--window', '-w', type=int,
                   help='Context window length (default from app.yaml)')
    p.add_argument('--encoding', '-e', help='Corpus encoding (default from app.yaml)')


def main(argv: list = None):
    parser = argparse.ArgumentParser(
        prog='charmodel',
        description='charmodel - Character-Level Markov Text Generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate corpus.txt -w 3 -i The -n 200
  %(prog)s generate corpus.txt -w 3 -i The -n 200 --random
  %(prog)s dump corpus.txt -w 2
  %(prog)s stats corpus.txt --json
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Suppress non-essential output')
    parser.add_argument('--log-level', choices=LOG_LEVELS, help='Logging level')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate text')
    _add_model_args(p)
    p.add_argument('--initial', '-i', required=True, help='Initial text')
    p.add_argument('--length', '-n', type=int,
                   help='Target text length (default from app.yaml)')
    mode = p.add_mutually_exclusive_group()
    mode.add_argument('--seed', '-s', type=int, help='Seed for reproducible output')
    mode.add_argument('--random', '-r', action='store_true', help='Non-deterministic output')
    p.add_argument('--verbose', '-v', action='store_true', help='Show tracebacks on error')

    # --- dump ---
    p = subparsers.add_parser('dump', help='Print the trained context table')
    _add_model_args(p)

    # --- stats ---
    p = subparsers.add_parser('stats', help='Show model statistics')
    _add_model_args(p)
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    cmd_map = {'gen': 'generate', 'g': 'generate'}
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)

    commands = {
        'generate': cmd_generate,
        'dump': cmd_dump,
        'stats': cmd_stats,
    }

    handler = commands.get(command)
    if handler:
        try:
            configure_logging(args.log_level)
            return handler(args, out)
        except KeyboardInterrupt:
            out.print("\nCancelled.")
            return 130
        except Exception as e:
            logger.debug(f"{command} failed", exc_info=True)
            out.error(str(e))
            if getattr(args, 'verbose', False):
                import traceback
                traceback.print_exc()
            return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())
