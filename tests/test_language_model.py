"""
Tests for the Character Language Model
======================================
Tests for ContextTable, sampling, training and generation
in language_model.py.
"""

import random

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from language_model import (
    CharFrequency,
    ContextDistribution,
    ContextTable,
    LanguageModel,
    main,
)


class SequenceRandom(random.Random):
    """Random source that replays fixed draws."""

    def __init__(self, draws):
        super().__init__(0)
        self._draws = list(draws)

    def random(self):
        return self._draws.pop(0)


CORPUS = (
    "the quick brown fox jumps over the lazy dog. "
    "then the dog sleeps while the fox watches the hen. "
)


class TestContextDistribution:
    """Tests for ContextDistribution."""

    def test_update_appends_new_char(self):
        dist = ContextDistribution()
        dist.update('x')
        assert len(dist) == 1
        assert dist.get(0).char == 'x'
        assert dist.get(0).count == 1

    def test_update_increments_existing(self):
        dist = ContextDistribution()
        dist.update('x')
        dist.update('y')
        dist.update('x')
        assert [e.char for e in dist] == ['x', 'y']
        assert [e.count for e in dist] == [2, 1]
        assert dist.total_count == 3

    def test_index_of_missing(self):
        assert ContextDistribution().index_of('q') == -1

    def test_str(self):
        dist = ContextDistribution()
        dist.update('b')
        dist.update('c')
        ContextTable.compute_probabilities(dist)
        assert str(dist) == "((b 1 0.5 0.5) (c 1 0.5 1.0))"

    def test_char_frequency_str(self):
        freq = CharFrequency('a', 3, 1.0, 1.0)
        assert str(freq) == "(a 3 1.0 1.0)"


class TestContextTable:
    """Tests for ContextTable."""

    def test_record_creates_context(self):
        table = ContextTable(2)
        table.record_observation('ab', 'c')
        assert 'ab' in table
        assert len(table) == 1
        assert table.lookup('ab').get(0).char == 'c'

    def test_lookup_unknown_returns_none(self):
        table = ContextTable(2)
        assert table.lookup('zz') is None

    def test_wrong_context_length_rejected(self):
        table = ContextTable(3)
        with pytest.raises(ValueError):
            table.record_observation('ab', 'c')
        with pytest.raises(ValueError):
            table.lookup('abcd')

    def test_compute_probabilities(self):
        dist = ContextDistribution()
        for char in 'aab':
            dist.update(char)
        ContextTable.compute_probabilities(dist)
        a, b = dist.get(0), dist.get(1)
        assert a.p == pytest.approx(2 / 3)
        assert a.cp == pytest.approx(2 / 3)
        assert b.p == pytest.approx(1 / 3)
        assert b.cp == pytest.approx(1.0)

    def test_compute_probabilities_empty(self):
        with pytest.raises(ValueError):
            ContextTable.compute_probabilities(ContextDistribution())

    def test_iteration_is_first_seen_order(self):
        table = ContextTable(1)
        for context in 'cab':
            table.record_observation(context, 'x')
        assert list(table) == ['c', 'a', 'b']


class TestTraining:
    """Tests for LanguageModel.train()."""

    def test_invalid_window_length(self):
        with pytest.raises(ValueError):
            LanguageModel(0)
        with pytest.raises(ValueError):
            LanguageModel(-2)

    def test_single_char_window(self):
        model = LanguageModel(1)
        model.train("aaaa")
        dist = model.table.lookup('a')
        assert len(dist) == 1
        assert dist.get(0).char == 'a'
        assert dist.get(0).count == 3
        assert dist.get(0).p == 1.0
        assert dist.get(0).cp == 1.0

    def test_repeating_corpus(self):
        model = LanguageModel(3)
        model.train("abcabcabc")
        assert list(model.table) == ['abc', 'bca', 'cab']
        assert model.table.lookup('abc').get(0).count == 2
        assert model.table.lookup('cab').get(0).char == 'c'

    def test_count_conservation(self):
        model = LanguageModel(2)
        model.train("abracadabra")
        # 'ab' twice, both followed by 'r'
        assert model.table.lookup('ab').total_count == 2
        # 'ra' twice, but the final one has no following character
        assert model.table.lookup('ra').total_count == 1

    def test_insertion_order_sets_cumulative_order(self):
        model = LanguageModel(1)
        model.train("abac")
        dist = model.table.lookup('a')
        assert [e.char for e in dist] == ['b', 'c']
        assert [e.cp for e in dist] == [0.5, 1.0]

    def test_probabilities_normalized(self):
        model = LanguageModel(2)
        model.train(CORPUS)
        for _, dist in model.table.items():
            assert sum(e.p for e in dist) == pytest.approx(1.0, abs=1e-9)
            assert dist.get(len(dist) - 1).cp == pytest.approx(1.0, abs=1e-9)
            cps = [e.cp for e in dist]
            assert cps == sorted(cps)

    @pytest.mark.parametrize("corpus", ["", "ab", "abc"])
    def test_short_corpus_leaves_table_empty(self, corpus):
        model = LanguageModel(3)
        model.train(corpus)
        assert len(model.table) == 0
        assert model.dump() == ""

    def test_identical_training_gives_identical_tables(self):
        first, second = LanguageModel(3), LanguageModel(3)
        first.train(CORPUS)
        second.train(CORPUS)
        assert first.dump() == second.dump()

    def test_train_file(self, tmp_path):
        corpus = tmp_path / "corpus.txt"
        corpus.write_text("abcabcabc", encoding="utf-8")
        model = LanguageModel(3)
        model.train_file(corpus)
        assert len(model.table) == 3

    def test_train_file_missing(self, tmp_path):
        model = LanguageModel(3)
        with pytest.raises(FileNotFoundError):
            model.train_file(tmp_path / "nope.txt")
        assert len(model.table) == 0


class TestSampling:
    """Tests for LanguageModel.sample_next_char()."""

    @pytest.fixture
    def dist(self):
        dist = ContextDistribution()
        dist.update('b')
        dist.update('c')
        ContextTable.compute_probabilities(dist)
        return dist

    def test_draw_below_first_cp(self, dist):
        model = LanguageModel(1, rng=SequenceRandom([0.49]))
        assert model.sample_next_char(dist) == 'b'

    def test_strict_inequality(self, dist):
        model = LanguageModel(1, rng=SequenceRandom([0.5]))
        assert model.sample_next_char(dist) == 'c'

    def test_tail_fallback(self):
        dist = ContextDistribution()
        dist.update('x')
        dist.update('y')
        dist.get(0).cp = 0.3
        dist.get(1).cp = 0.6
        model = LanguageModel(1, rng=SequenceRandom([0.9]))
        assert model.sample_next_char(dist) == 'y'


class TestGeneration:
    """Tests for LanguageModel.generate()."""

    @pytest.fixture
    def trained(self):
        model = LanguageModel(3, seed=20)
        model.train("abcabcabc")
        return model

    def test_initial_shorter_than_window(self, trained):
        assert trained.generate("ab", 1) == "ab"

    def test_initial_at_or_above_target(self, trained):
        assert trained.generate("hello", 3) == "hello"
        assert trained.generate("abc", 3) == "abc"

    def test_unknown_context_returns_initial(self, trained):
        assert trained.generate("xyz", 10) == "xyz"

    def test_stops_at_unknown_context(self):
        model = LanguageModel(2, seed=1)
        model.train("abcd")
        assert model.generate("ab", 10) == "abcd"

    def test_length_bound(self, trained):
        text = trained.generate("abc", 10)
        # Loop runs while len(result) - window < target
        assert len(text) == 10 + 3
        assert text == "abcabcabcabca"

    def test_single_char_window_generation(self):
        model = LanguageModel(1, seed=5)
        model.train("aaaa")
        assert model.generate("a", 4) == "aaaaa"

    def test_uses_last_window_of_initial_text(self):
        model = LanguageModel(2, seed=3)
        model.train("xyxyxy")
        assert model.generate("zzzxy", 8) == "zzzxyxyxyx"

    def test_seeded_models_are_reproducible(self):
        outputs = []
        for _ in range(2):
            model = LanguageModel(2, seed=42)
            model.train(CORPUS)
            outputs.append(model.generate("th", 120))
        assert outputs[0] == outputs[1]

    def test_generated_chars_come_from_corpus(self):
        model = LanguageModel(2)
        model.train(CORPUS)
        text = model.generate("th", 80)
        assert set(text) <= set(CORPUS)


class TestDumpAndStats:
    """Tests for dump() and stats()."""

    def test_dump_lists_only_observed_contexts(self):
        model = LanguageModel(1)
        model.train("abac")
        lines = model.dump().splitlines()
        assert lines == [
            "a : ((b 1 0.5 0.5) (c 1 0.5 1.0))",
            "b : ((a 1 1.0 1.0))",
        ]
        assert str(model) == model.dump()

    def test_stats(self):
        model = LanguageModel(1)
        model.train("abac")
        stats = model.stats()
        assert stats.contexts == 2
        assert stats.observations == 3
        assert stats.distinct_chars == 3
        assert stats.to_dict()['window_length'] == 1


class TestMain:
    """Tests for the positional entry point."""

    def test_fixed_mode(self, tmp_path, capsys):
        corpus = tmp_path / "corpus.txt"
        corpus.write_text("abcabcabc", encoding="utf-8")
        assert main(["3", "abc", "6", "fixed", str(corpus)]) == 0
        assert capsys.readouterr().out.strip() == "abcabcabc"

    def test_random_mode_trains_too(self, tmp_path, capsys):
        corpus = tmp_path / "corpus.txt"
        corpus.write_text("abcabcabc", encoding="utf-8")
        assert main(["3", "abc", "6", "random", str(corpus)]) == 0
        assert capsys.readouterr().out.strip() == "abcabcabc"
