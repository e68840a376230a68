"""
Unit tests for PassageIngestionPipeline and passage identity.
"""

import pytest

from readprep.models import Genre, RawSource, SourceType, passage_key
from readprep.processing.chunker import PassageChunker
from readprep.processing.pipeline import PassageIngestionPipeline, ingest_text
from readprep.processing.quality_filter import PassageQualityFilter


def _table_paragraph(rows: int = 130) -> str:
    return " ".join(f"{1000 + i}|{i}%" for i in range(rows))


class TestPassageKey:
    def test_stable_across_case_and_whitespace(self):
        assert passage_key("Hello   World\n") == passage_key("hello world")

    def test_format(self):
        key = passage_key("Some passage text.")
        assert key.startswith("passage-")
        assert len(key) == len("passage-") + 12

    def test_only_leading_characters_matter(self):
        head = "x" * 100
        assert passage_key(head + " ending one") == passage_key(head + " ending two")
        assert passage_key("a" + head) != passage_key("b" + head)


class TestIngest:
    def test_accepts_clean_prose(self, prose_text):
        source = RawSource(text=prose_text, title="The Lighthouse", author="A. Keeper")

        result = PassageIngestionPipeline().ingest(source, genre=Genre.HISTORY)

        assert len(result.passages) == 1
        passage = result.passages[0]
        assert passage.text == prose_text
        assert passage.word_count == 168
        assert passage.source_title == "The Lighthouse"
        assert passage.source_author == "A. Keeper"
        assert passage.genre == Genre.HISTORY
        assert passage.id == passage_key(prose_text)
        assert result.acceptance_rate == 1.0

    def test_rejections_counted_by_reason(self, prose_text):
        text = f"{prose_text}\n\n{_table_paragraph()}"

        result = PassageIngestionPipeline().ingest(RawSource(text=text))

        assert result.candidates_seen == 2
        assert len(result.passages) == 1
        assert result.rejected == 1
        assert result.rejection_reasons["junk_ratio"] == 1
        assert result.acceptance_rate == pytest.approx(0.5)

    def test_duplicate_passages_collapsed(self, prose_text):
        text = "\n\n".join([prose_text] * 3)

        result = PassageIngestionPipeline().ingest(RawSource(text=text))

        assert result.candidates_seen == 3
        assert len(result.passages) == 1
        assert result.rejected == 0

    def test_every_passage_within_bounds(self, prose_text):
        text = " ".join([prose_text] * 4)

        result = PassageIngestionPipeline().ingest(RawSource(text=text))

        assert result.passages
        assert all(125 <= p.word_count <= 200 for p in result.passages)

    def test_empty_source(self):
        result = PassageIngestionPipeline().ingest(RawSource(text=""))
        assert result.passages == []
        assert result.acceptance_rate == 0.0


class TestGenrePrecedence:
    def test_explicit_genre_wins(self, prose_text):
        source = RawSource(text=prose_text, category="science")
        result = PassageIngestionPipeline().ingest(source, genre=Genre.MEMOIR)
        assert result.passages[0].genre == Genre.MEMOIR

    def test_category_used_when_no_genre(self, prose_text):
        source = RawSource(text=prose_text, category="science")
        result = PassageIngestionPipeline().ingest(source)
        assert result.passages[0].genre == Genre.SCIENCE

    def test_detected_otherwise(self, prose_text):
        source = RawSource(text=prose_text.replace("history", "heritage"), title="Newsroom")
        result = PassageIngestionPipeline().ingest(source)
        # "news" in the source title
        assert result.passages[0].genre == Genre.JOURNALISM


class TestConfiguration:
    def test_custom_components(self, prose_text):
        pipeline = PassageIngestionPipeline(
            chunker=PassageChunker(min_words=50, max_words=100),
            quality_filter=PassageQualityFilter(min_words=50),
        )

        result = pipeline.ingest(RawSource(text=prose_text))

        assert result.passages
        assert all(50 <= p.word_count <= 100 for p in result.passages)

    def test_from_settings(self):
        class _Settings:
            passage_min_words = 60
            passage_max_words = 90
            passage_target_words = 80
            min_sentences = 3
            max_junk_ratio = 0.25
            max_dialogue_ratio = 0.4
            min_avg_word_length = 3.0
            min_connectives = 3

        pipeline = PassageIngestionPipeline.from_settings(_Settings())

        assert pipeline.chunker.max_words == 90
        assert pipeline.quality_filter.min_words == 60

    def test_gutenberg_source_cleaned_first(self, prose_text):
        book = (
            "*** START OF THE PROJECT GUTENBERG EBOOK LIGHTHOUSE ***\n"
            f"CHAPTER I\n\n{prose_text}\n\n"
            "*** END OF THE PROJECT GUTENBERG EBOOK LIGHTHOUSE ***\n"
        )
        source = RawSource(text=book, source_type=SourceType.GUTENBERG)

        result = PassageIngestionPipeline().ingest(source, genre=Genre.LITERATURE)

        assert [p.text for p in result.passages] == [prose_text]


def test_ingest_text_convenience(prose_text):
    passages = ingest_text(prose_text, title="Harbor", genre=Genre.HISTORY)
    assert len(passages) == 1
    assert passages[0].source_title == "Harbor"
