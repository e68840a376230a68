"""
Passage Sizing and Quality Thresholds

Word bounds mirror a real exam's medium-length reading passage
(125-200 words, 160 target). Quality thresholds were tuned on
book, encyclopedia and news text.
"""

# ============================================================================
# Passage length (words)
# ============================================================================
MIN_WORDS = 125  # Reject/drop anything shorter
MAX_WORDS = 200  # Never emit a chunk longer than this
TARGET_WORDS = 160  # Preferred passage length

# ============================================================================
# Structural quality thresholds
# ============================================================================
MIN_SENTENCES = 3  # Fewer terminal marks = list or fragment
MAX_JUNK_RATIO = 0.25  # Digits + symbols over content chars (tables, data)
MAX_DIALOGUE_RATIO = 0.40  # Quoted chars over total chars (scripts)
MIN_AVG_WORD_LENGTH = 3.0  # Abbreviation lists, gibberish
MIN_CONNECTIVES = 3  # Distinct narrative cues needed for prose flow
BOILERPLATE_WINDOW = 200  # Leading chars scanned for boilerplate markers

# ============================================================================
# Reading / generation estimates
# ============================================================================
READING_WORDS_PER_MINUTE = 200
ITEMS_PER_PASSAGE_ESTIMATE = 3
