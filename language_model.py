#!/usr/bin/env python3
"""
Character-Level Markov Language Model
=====================================
Learns which characters follow each fixed-length context window of a
training text, then generates new text by sampling from those learned
transition probabilities.

Key features:
- Order-k model (k = window length)
- Insertion-ordered distributions (first-seen character first)
- Seedable random source for reproducible output
- Diagnostic table dump

Theory:
-------
For every offset i in the corpus the window text[i:i+k] is a context and
text[i+k] is the character that followed it. Counts per (context, char)
become probabilities p = count / total, and the running sum cp of those
probabilities maps a uniform draw r in [0, 1) to the first character whose
cp exceeds r.

Usage:
    model = LanguageModel(3, seed=20)
    model.train(corpus_text)
    print(model.generate("The", 200))
"""

import argparse
import logging
import random
import sys
from dataclasses import dataclass
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class CharFrequency:
    """One character observed after a context, with its statistics."""
    char: str
    count: int = 1
    p: float = 0.0
    cp: float = 0.0

    def __str__(self) -> str:
        return f"({self.char} {self.count} {self.p} {self.cp})"


class ContextDistribution:
    """Characters seen after a single context, kept in first-seen order."""

    def __init__(self):
        self._entries: list[CharFrequency] = []

    def index_of(self, char: str) -> int:
        """Position of char in the distribution, or -1 if never seen."""
        for i, entry in enumerate(self._entries):
            if entry.char == char:
                return i
        return -1

    def update(self, char: str):
        """Count one more occurrence of char (appending it if new)."""
        i = self.index_of(char)
        if i == -1:
            self._entries.append(CharFrequency(char))
        else:
            self._entries[i].count += 1

    def get(self, index: int) -> CharFrequency:
        return self._entries[index]

    @property
    def total_count(self) -> int:
        return sum(entry.count for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CharFrequency]:
        return iter(self._entries)

    def __str__(self) -> str:
        return '(' + ' '.join(str(entry) for entry in self._entries) + ')'


class ContextTable:
    """Maps each context window to its ContextDistribution."""

    def __init__(self, window_length: int):
        self.window_length = window_length
        self._table: dict[str, ContextDistribution] = {}

    def _check_context(self, context: str):
        if len(context) != self.window_length:
            raise ValueError(
                f"Context {context!r} has length {len(context)}, "
                f"expected {self.window_length}"
            )

    def record_observation(self, context: str, char: str):
        """Record that char followed context once."""
        self._check_context(context)
        distribution = self._table.get(context)
        if distribution is None:
            distribution = ContextDistribution()
            self._table[context] = distribution
        distribution.update(char)

    def lookup(self, context: str) -> Optional[ContextDistribution]:
        """Distribution for context, or None if it was never observed."""
        self._check_context(context)
        return self._table.get(context)

    @staticmethod
    def compute_probabilities(distribution: ContextDistribution):
        """
        Set p and cp on every entry of distribution.

        p is count / total; cp is the inclusive running sum of p in
        insertion order, so the last entry ends at 1.0.
        """
        total = distribution.total_count
        if total == 0:
            raise ValueError("Cannot compute probabilities of an empty distribution")

        cp = 0.0
        for entry in distribution:
            entry.p = entry.count / total
            cp += entry.p
            entry.cp = cp

    def items(self) -> Iterator[tuple[str, ContextDistribution]]:
        return iter(self._table.items())

    def dump(self) -> str:
        """One 'context : distribution' line per known context."""
        return ''.join(f"{key} : {dist}\n" for key, dist in self._table.items())

    def __contains__(self, context: str) -> bool:
        return context in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)


# =============================================================================
# MODEL
# =============================================================================

@dataclass
class ModelStats:
    """Summary of a trained model."""
    window_length: int
    contexts: int
    observations: int
    distinct_chars: int

    def to_dict(self) -> dict:
        return {
            'window_length': self.window_length,
            'contexts': self.contexts,
            'observations': self.observations,
            'distinct_chars': self.distinct_chars,
        }


class LanguageModel:
    """Order-k character model: trains on a corpus, generates text."""

    def __init__(self,
                 window_length: int,
                 seed: Optional[int] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize an untrained model.

        Args:
            window_length: Context size in characters (>= 1)
            seed: Seed for reproducible generation; None for non-deterministic
            rng: Explicit random source (takes precedence over seed)
        """
        if isinstance(window_length, bool) or not isinstance(window_length, int) or window_length < 1:
            raise ValueError(f"window_length must be a positive integer, got {window_length!r}")

        self.window_length = window_length
        self.table = ContextTable(window_length)
        if rng is not None:
            self._rng = rng
        else:
            self._rng = random.Random(seed)

    def train(self, corpus_text: str):
        """
        Learn transitions from corpus_text in a single pass.

        Probabilities of a context are recomputed after every observation
        of it. A corpus shorter than window_length + 1 leaves the table empty.
        """
        k = self.window_length
        for i in range(len(corpus_text) - k):
            context = corpus_text[i:i + k]
            self.table.record_observation(context, corpus_text[i + k])
            self.table.compute_probabilities(self.table.lookup(context))

        logger.info(
            f"Trained order-{k} model on {len(corpus_text)} characters: "
            f"{len(self.table)} contexts"
        )

    def train_file(self, path, encoding: Optional[str] = None):
        """Read a corpus file completely, then train on it."""
        # charmodel imports this module, so the import is local
        from charmodel.corpus import read_corpus

        self.train(read_corpus(path, encoding=encoding))

    def sample_next_char(self, distribution: ContextDistribution) -> str:
        """Pick a character from distribution using the model's random source."""
        r = self._rng.random()
        for entry in distribution:
            if entry.cp > r:
                return entry.char
        # Floating-point shortfall at the tail resolves to the last entry
        return distribution.get(len(distribution) - 1).char

    def generate(self, initial_text: str, target_length: int) -> str:
        """
        Generate text continuing initial_text.

        Args:
            initial_text: Text to start with
            target_length: Generation stops once the result is longer than
                target_length + window_length - 1 characters

        Returns:
            initial_text unchanged if it is at least target_length long or
            shorter than the window; otherwise the extended text, possibly
            cut short when the current window was never seen in training.
        """
        k = self.window_length
        if len(initial_text) >= target_length or len(initial_text) < k:
            logger.debug(
                f"No generation: initial length {len(initial_text)}, "
                f"target {target_length}, window {k}"
            )
            return initial_text

        window = initial_text[-k:]
        result = initial_text
        while len(result) - k < target_length:
            distribution = self.table.lookup(window)
            if distribution is None:
                logger.debug(f"Unknown context {window!r}, stopping at {len(result)} chars")
                return result
            char = self.sample_next_char(distribution)
            result += char
            window = window[1:] + char

        return result

    def stats(self) -> ModelStats:
        observations = 0
        chars = set()
        for _, distribution in self.table.items():
            observations += distribution.total_count
            chars.update(entry.char for entry in distribution)
        return ModelStats(
            window_length=self.window_length,
            contexts=len(self.table),
            observations=observations,
            distinct_chars=len(chars),
        )

    def dump(self) -> str:
        return self.table.dump()

    def __str__(self) -> str:
        return self.dump()


# =============================================================================
# MAIN
# =============================================================================

def main(argv: list[str] = None):
    parser = argparse.ArgumentParser(
        description='Generate text with a character-level Markov model'
    )
    parser.add_argument('window_length', type=int, help='Context window length')
    parser.add_argument('initial_text', help='Text to start generation from')
    parser.add_argument('target_length', type=int, help='Length bound for generated text')
    parser.add_argument(
        'mode',
        choices=['fixed', 'random'],
        help="'fixed' uses the configured seed, 'random' is non-deterministic"
    )
    parser.add_argument('corpus', help='Path to the training corpus')

    args = parser.parse_args(argv)

    seed = None
    if args.mode == 'fixed':
        from charmodel.settings import fixed_seed
        seed = fixed_seed()

    model = LanguageModel(args.window_length, seed=seed)
    model.train_file(args.corpus)
    print(model.generate(args.initial_text, args.target_length))
    return 0


if __name__ == '__main__':
    sys.exit(main())
