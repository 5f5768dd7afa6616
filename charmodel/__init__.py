#!/usr/bin/env python3
"""
charmodel - Character-Level Markov Text Generator
=================================================

Trains an order-k character model on a text corpus and generates new
text by sampling the learned transition probabilities.

Quick Start
-----------
    from charmodel import LanguageModel, read_corpus

    model = LanguageModel(3, seed=20)
    model.train(read_corpus("corpus.txt"))
    print(model.generate("The", 200))

Modules
-------
    language_model     - ContextTable and LanguageModel (top-level module)
    charmodel.corpus   - Corpus file reading
    charmodel.config   - Environment overrides (.env)
    charmodel.settings - app.yaml settings

CLI Usage
---------
    python -m charmodel generate corpus.txt -w 3 -i The -n 200
    python -m charmodel dump corpus.txt -w 2
    python -m charmodel stats corpus.txt --json
"""

__version__ = "0.1.0"
__author__ = "charmodel"

import sys
from pathlib import Path

# Ensure parent directory is in path for imports
_parent = Path(__file__).parent.parent
if str(_parent) not in sys.path:
    sys.path.insert(0, str(_parent))

from language_model import (
    CharFrequency,
    ContextDistribution,
    ContextTable,
    LanguageModel,
    ModelStats,
)

from .config import Config, get_config
from .corpus import read_corpus
from .settings import get_setting

__all__ = [
    '__version__',
    'CharFrequency',
    'ContextDistribution',
    'ContextTable',
    'LanguageModel',
    'ModelStats',
    'Config',
    'get_config',
    'read_corpus',
    'get_setting',
]
