"""
Text Cleaner for Raw Source Text.

Strips source-specific boilerplate (distribution headers/footers, trailing
reference sections, markup) and editorial noise (illustration markers,
citation brackets, footnote asterisks, emphasis underscores) so that the
chunker only ever sees prose.

Cleaning is IN-MEMORY only and never fails: malformed input simply yields
less (possibly empty) text. Paragraph boundaries are preserved as a single
blank line because the chunker splits on them.
"""
from __future__ import annotations

import re

from loguru import logger

from readprep.models import SourceType


class TextCleaner:
    """
    Best-effort cleaner for one source type.

    Usage:
        cleaner = TextCleaner(SourceType.GUTENBERG)
        text = cleaner.clean(raw_book_text)
    """

    # Distribution header/footer markers for public-domain book text
    GUTENBERG_START_MARKERS = (
        "*** START OF THE PROJECT GUTENBERG",
        "*** START OF THIS PROJECT GUTENBERG",
        "*END*THE SMALL PRINT",
    )
    GUTENBERG_END_MARKERS = (
        "*** END OF THE PROJECT GUTENBERG",
        "*** END OF THIS PROJECT GUTENBERG",
        "End of the Project Gutenberg",
        "End of Project Gutenberg",
    )

    # First heading of the actual story (skips preface, contents, etc.)
    STORY_START_PATTERNS = (
        re.compile(r"\n\s*CHAPTER\s+(?:ONE|1|I)[.\s]", re.IGNORECASE),
        re.compile(r"\n\s*BOOK\s+(?:ONE|1|I)[.\s]", re.IGNORECASE),
        re.compile(r"\n\s*PART\s+(?:ONE|1|I)[.\s]", re.IGNORECASE),
        re.compile(r"\n\s*I\.\s*\n"),
        re.compile(r"\n\s*1\.\s*\n"),
    )

    # Encyclopedia sections that end the useful body
    WIKIPEDIA_END_SECTIONS = (
        "== References ==",
        "== See also ==",
        "== Notes ==",
        "== External links ==",
        "== Further reading ==",
    )

    PATTERNS = {
        "wiki_heading": re.compile(r"^==+\s*[^=\n]+?\s*==+\s*$", re.MULTILINE),
        "html_tag": re.compile(r"<[^>]*>"),
        "news_sentence_break": re.compile(r"\. (?=[A-Z])"),
        "paragraph_break": re.compile(r"\n\s*\n"),
        # Editorial noise, applied per paragraph
        "illustration": re.compile(r"\[Illustration[^\]]*\]", re.IGNORECASE),
        "copyright": re.compile(r"\[_Copyright[^\]]*\]", re.IGNORECASE),
        "chapter_heading": re.compile(r"^(?:CHAPTER|Chapter)\s+(?:[IVXLCDM]+|\d+)\b\.?\s*", re.MULTILINE),
        "citation": re.compile(r"\[\d+(?:,\s*\d+)*\]"),
        "editor_note": re.compile(r"\[[^\]]{0,50}\]"),
        "footnote_star": re.compile(r"\*+"),
        "superscript": re.compile(r"\^?\{[^}]*\}"),
        "emphasis": re.compile(r"_([^_]+)_"),
        "whitespace": re.compile(r"\s+"),
    }

    QUOTE_TRANSLATION = str.maketrans({
        "“": '"',
        "”": '"',
        "‘": "'",
        "’": "'",
    })

    def __init__(self, source_type: SourceType = SourceType.FILE):
        self.source_type = SourceType(source_type)

    def clean(self, raw: str) -> str:
        """
        Clean raw source text.

        Args:
            raw: Text exactly as fetched or uploaded

        Returns:
            Prose paragraphs separated by one blank line (may be empty)
        """
        if not raw:
            return ""

        text = raw.replace("\r\n", "\n").replace("\r", "\n")

        if self.source_type == SourceType.GUTENBERG:
            text = self._strip_gutenberg(text)
        elif self.source_type == SourceType.WIKIPEDIA:
            text = self._strip_wikipedia(text)
        elif self.source_type == SourceType.GUARDIAN:
            text = self._strip_guardian(text)

        paragraphs = [
            self._clean_paragraph(p)
            for p in self.PATTERNS["paragraph_break"].split(text)
        ]
        cleaned = "\n\n".join(p for p in paragraphs if p)

        logger.debug(
            f"Cleaned {self.source_type.value} text: {len(raw)} -> {len(cleaned)} chars"
        )
        return cleaned

    # =========================================================================
    # Source-specific stripping
    # =========================================================================

    def _strip_gutenberg(self, text: str) -> str:
        """Drop distribution header/footer and front matter."""
        for marker in self.GUTENBERG_START_MARKERS:
            idx = text.find(marker)
            if idx != -1:
                end_of_line = text.find("\n", idx)
                text = "" if end_of_line == -1 else text[end_of_line + 1:]
                break

        for marker in self.GUTENBERG_END_MARKERS:
            idx = text.find(marker)
            if idx != -1:
                text = text[:idx]
                break

        for pattern in self.STORY_START_PATTERNS:
            match = pattern.search(text)
            if match:
                text = text[match.start():]
                break

        return text.strip()

    def _strip_wikipedia(self, text: str) -> str:
        """Cut trailing reference sections and remove == Heading == lines."""
        cut = len(text)
        for marker in self.WIKIPEDIA_END_SECTIONS:
            idx = text.find(marker)
            if idx != -1:
                cut = min(cut, idx)
        text = text[:cut]

        return self.PATTERNS["wiki_heading"].sub("\n", text).strip()

    def _strip_guardian(self, text: str) -> str:
        """News body text arrives as one blob: drop markup, split sentences into paragraphs."""
        text = self.PATTERNS["html_tag"].sub("", text)
        text = self.PATTERNS["whitespace"].sub(" ", text).strip()
        return self.PATTERNS["news_sentence_break"].sub(".\n\n", text)

    # =========================================================================
    # Generic editorial cleanup
    # =========================================================================

    def _clean_paragraph(self, paragraph: str) -> str:
        p = self.PATTERNS
        text = p["illustration"].sub("", paragraph)
        text = p["copyright"].sub("", text)
        text = p["chapter_heading"].sub("", text)
        text = p["citation"].sub("", text)
        text = p["editor_note"].sub("", text)
        text = p["footnote_star"].sub("", text)
        text = p["superscript"].sub("", text)
        text = text.translate(self.QUOTE_TRANSLATION)
        text = p["emphasis"].sub(r"\1", text)
        return p["whitespace"].sub(" ", text).strip()


def clean_text(raw: str, source_type: SourceType = SourceType.FILE) -> str:
    """Convenience function to clean text for one source type."""
    return TextCleaner(source_type).clean(raw)
