"""
Unit tests for PassageChunker.

The word-bound invariant is checked on every emitted chunk, including
generated text with irregular sentence and paragraph lengths.
"""

import random

import pytest

from readprep.processing.chunker import (
    PassageChunker,
    analyze_chunks,
    count_words,
    estimate_reading_time,
    split_sentences,
)


def _random_text(seed: int, paragraphs: int = 12) -> str:
    rng = random.Random(seed)
    vocabulary = ["harbor", "keeper", "council", "stone", "light", "water", "village", "season"]
    out = []
    for _ in range(paragraphs):
        sentences = []
        for _ in range(rng.randint(1, 12)):
            words = [rng.choice(vocabulary) for _ in range(rng.randint(3, 40))]
            sentences.append(" ".join(words).capitalize() + ".")
        out.append(" ".join(sentences))
    return "\n\n".join(out)


def assert_bounded(chunks, low=125, high=200):
    for chunk in chunks:
        assert low <= chunk.word_count <= high, chunk.word_count
        assert count_words(chunk.text) == chunk.word_count


class TestHelpers:
    def test_count_words(self):
        assert count_words("  one two\nthree\t four ") == 4
        assert count_words("") == 0

    def test_split_sentences_keeps_trailing_fragment(self):
        assert split_sentences('He left. "Why?" she asked! And then') == [
            "He left.",
            '"Why?"',
            "she asked!",
            "And then",
        ]

    def test_split_sentences_keeps_original_text(self):
        text = "... and so it began. The U.S. Army marched 3.5 miles. Done"

        sentences = split_sentences(text)

        assert sentences == [
            "...",
            "and so it began.",
            "The U.S.",
            "Army marched 3.5 miles.",
            "Done",
        ]
        assert " ".join(sentences) == text

    def test_estimate_reading_time_rounds_up(self):
        # 200 words per minute -> 0.3s per word
        assert estimate_reading_time(" ".join(["word"] * 200)) == 60
        assert estimate_reading_time("one") == 1
        assert estimate_reading_time("") == 0


class TestConstruction:
    def test_invalid_bounds_rejected(self):
        with pytest.raises(ValueError):
            PassageChunker(min_words=200, max_words=100)
        with pytest.raises(ValueError):
            PassageChunker(min_words=0, max_words=100)

    def test_defaults(self):
        chunker = PassageChunker()
        assert (chunker.min_words, chunker.max_words, chunker.target_words) == (125, 200, 160)


class TestParagraphPacking:
    def test_each_fitting_paragraph_becomes_one_chunk(self, prose_text):
        text = "\n\n".join([prose_text] * 3)

        chunks = PassageChunker().chunk(text)

        assert [c.word_count for c in chunks] == [168, 168, 168]
        assert [c.id for c in chunks] == ["chunk-0", "chunk-1", "chunk-2"]
        assert chunks[0].text == prose_text

    def test_short_paragraphs_are_combined(self, prose_text):
        sentences = split_sentences(prose_text)
        # Ten one-sentence paragraphs, 168 words in total
        text = "\n\n".join(sentences)

        chunks = PassageChunker().chunk(text)

        assert len(chunks) == 1
        assert chunks[0].word_count == 168
        assert chunks[0].text.count("\n\n") == 9

    def test_trailing_short_buffer_discarded(self, prose_text):
        tail = " ".join(["closing"] * 39) + " words."
        text = f"{prose_text}\n\n{tail}"

        chunks = PassageChunker().chunk(text)

        assert [c.word_count for c in chunks] == [168]


class TestSentenceSplitting:
    def test_oversized_paragraph_split_at_sentences(self, prose_text):
        text = " ".join([prose_text] * 3)

        chunks = PassageChunker().chunk(text)

        assert len(chunks) >= 2
        assert_bounded(chunks)
        for chunk in chunks:
            assert chunk.text.endswith(".")
            assert chunk.text in text

    def test_sentence_longer_than_ceiling_dropped(self, prose_text):
        run_on = " ".join(["endless"] * 250) + "."
        text = f"{prose_text}\n\n{run_on}\n\n{prose_text}"

        chunks = PassageChunker().chunk(text)

        assert [c.word_count for c in chunks] == [168, 168]
        assert all("endless" not in c.text for c in chunks)

    def test_target_words_tightens_ceiling(self, prose_text):
        chunks = PassageChunker().chunk(f"{prose_text} {prose_text}", target_words=150)

        assert chunks
        assert_bounded(chunks, high=150)

    def test_target_words_clamped_to_bounds(self, prose_text):
        chunker = PassageChunker()
        # Above max is ignored, below min is raised to min
        assert [c.word_count for c in chunker.chunk(prose_text, target_words=500)] == [168]
        assert chunker.chunk(prose_text, target_words=10) == []


class TestInvariants:
    @pytest.mark.parametrize("seed", range(20))
    def test_all_chunks_within_bounds(self, seed):
        assert_bounded(PassageChunker().chunk(_random_text(seed)))

    @pytest.mark.parametrize("bounds", [(50, 80), (100, 120), (125, 200)])
    def test_custom_bounds_respected(self, bounds):
        low, high = bounds
        chunker = PassageChunker(min_words=low, max_words=high)
        assert_bounded(chunker.chunk(_random_text(7, paragraphs=20)), low, high)

    def test_deterministic(self):
        text = _random_text(3)
        assert PassageChunker().chunk(text) == PassageChunker().chunk(text)

    def test_empty_text(self):
        assert PassageChunker().chunk("") == []


class TestAnalyzeChunks:
    def test_stats(self, prose_text):
        chunks = PassageChunker().chunk("\n\n".join([prose_text] * 2))
        stats = analyze_chunks(chunks)

        assert stats.total_chunks == 2
        assert stats.total_words == 336
        assert stats.avg_word_count == 168
        assert stats.word_counts == [168, 168]

    def test_empty(self):
        assert analyze_chunks([]).total_chunks == 0
