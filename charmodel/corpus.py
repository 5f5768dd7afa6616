#!/usr/bin/env python3
"""
Corpus Input
============
Reads a training corpus into memory in one piece. Read and decode errors
propagate to the caller so a model is never trained on a partial corpus.
"""

import logging
from pathlib import Path

from charmodel.settings import corpus_encoding, resolve_path

logger = logging.getLogger(__name__)


def read_corpus(path, encoding: str = None) -> str:
    """
    Read the whole corpus file.

    Args:
        path: Corpus file path (relative paths resolve against the cwd)
        encoding: Text encoding; defaults to corpus.encoding in app.yaml

    Raises:
        FileNotFoundError: If path does not exist
        OSError, UnicodeDecodeError: Propagated unchanged
    """
    filepath = resolve_path(path) if not isinstance(path, Path) else path
    if not filepath.exists():
        raise FileNotFoundError(f"Corpus not found: {filepath}")

    encoding = encoding or corpus_encoding()
    with open(filepath, 'r', encoding=encoding, newline='') as f:
        text = f.read()

    logger.debug(f"Read {len(text)} characters from {filepath}")
    return text
