"""
AI-Generated Text Detection
===========================
Rule-based estimate of how likely a pasted passage of Czech text was
produced by a generative AI tool rather than typed by the student.

Each check is independent and adds a fixed weight to the score; every
triggered check contributes one human-readable reason, in evaluation order.
The reasons are shown to the teacher verbatim.

    - AI boilerplate phrases         +0.30 each
    - Heavily structured lists       +0.20
    - Uniform sentence length        +0.15
    - No personal pronouns           +0.10
    - Very long paste                +0.10

confidence = min(score, 1.0); the passage is flagged at confidence >= 0.3.
The function is pure and never raises.
"""

import math
import re
from typing import List

from pydantic import BaseModel, ConfigDict


# =============================================================================
# HEURISTIC CONSTANTS
# =============================================================================

# Checked in this order; reasons follow the same order.
AI_PHRASES = (
    'jako umělá inteligence',
    'jako AI',
    'jako jazykový model',
    'nemohu poskytnout',
    'je důležité poznamenat',
    'v neposlední řadě',
    'celkově lze říci',
    'v dnešní době',
    'je třeba zdůraznit',
    'obecně lze konstatovat',
)

PERSONAL_PRONOUNS = ('já', 'my', 'můj', 'moje', 'mé', 'naše', 'nás')

MIN_TEXT_LENGTH = 100
AI_THRESHOLD = 0.3

PHRASE_WEIGHT = 0.3
STRUCTURE_WEIGHT = 0.2
UNIFORMITY_WEIGHT = 0.15
IMPERSONAL_WEIGHT = 0.1
LONG_TEXT_WEIGHT = 0.1

MAX_LIST_LINES = 5
MIN_SENTENCE_LENGTH = 10
MIN_SENTENCES = 5
UNIFORMITY_RATIO = 0.2
MIN_WORDS_FOR_PRONOUN_CHECK = 100
MIN_PRONOUNS = 2
LONG_TEXT_LENGTH = 2000

REASON_PHRASE = 'Obsahuje typickou AI frázi: "{phrase}"'
REASON_STRUCTURED = 'Text je příliš strukturovaný (mnoho odrážek)'
REASON_UNIFORM = 'Věty mají podezřele stejnou délku'
REASON_IMPERSONAL = 'Chybí osobní zájmena (text je neosobní)'
REASON_LONG = 'Velmi dlouhý vložený text'

# Leading blank lines never change the count, so only same-line
# indentation is allowed before the marker.
_BULLET_LINE_RE = re.compile(r'^[^\S\n]*[-•*]\s', re.MULTILINE)
_NUMBERED_LINE_RE = re.compile(r'^[^\S\n]*[0-9]+\.\s', re.MULTILINE)
_SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')
_ASCII_WORD = '[A-Za-z0-9_]'


def _ascii_bounded(word: str) -> str:
    """
    Pattern for word between ASCII-only word boundaries: accented letters
    are non-word characters, so 'já' only ends where an ASCII letter follows.
    """
    def is_word(char):
        return re.fullmatch(_ASCII_WORD, char) is not None

    before = f'(?<!{_ASCII_WORD})' if is_word(word[0]) else f'(?<={_ASCII_WORD})'
    after = f'(?!{_ASCII_WORD})' if is_word(word[-1]) else f'(?={_ASCII_WORD})'
    return f'{before}(?i:{re.escape(word)}){after}'


_PRONOUN_RE = re.compile('|'.join(_ascii_bounded(p) for p in PERSONAL_PRONOUNS))
_WHITESPACE_RE = re.compile(r'\s+')


class AiTextAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_likely_ai: bool
    confidence: float  # 0-1
    reasons: List[str]

    def to_dict(self) -> dict:
        return {
            "is_likely_ai": self.is_likely_ai,
            "confidence": self.confidence,
            "reasons": list(self.reasons),
        }


# =============================================================================
# INDIVIDUAL CHECKS
# =============================================================================

def _coerce_text(text) -> str:
    if text is None:
        return ""
    if isinstance(text, str):
        return text
    if isinstance(text, (bytes, bytearray)):
        return bytes(text).decode("utf-8", errors="replace")
    return str(text)


def _matched_phrases(text: str) -> List[str]:
    lowered = text.lower()
    return [phrase for phrase in AI_PHRASES if phrase.lower() in lowered]


def _is_overly_structured(text: str) -> bool:
    bullet_points = len(_BULLET_LINE_RE.findall(text))
    numbered_points = len(_NUMBERED_LINE_RE.findall(text))
    return bullet_points > MAX_LIST_LINES or numbered_points > MAX_LIST_LINES


def _has_uniform_sentences(text: str) -> bool:
    lengths = [
        len(s.strip()) for s in _SENTENCE_SPLIT_RE.split(text)
        if len(s.strip()) > MIN_SENTENCE_LENGTH
    ]
    if len(lengths) < MIN_SENTENCES:
        return False

    avg_length = sum(lengths) / len(lengths)
    variance = sum((length - avg_length) ** 2 for length in lengths) / len(lengths)
    std_dev = math.sqrt(variance)
    return std_dev < avg_length * UNIFORMITY_RATIO


def _is_impersonal(text: str) -> bool:
    pronoun_count = len(_PRONOUN_RE.findall(text))
    word_count = len(_WHITESPACE_RE.split(text))
    return word_count > MIN_WORDS_FOR_PRONOUN_CHECK and pronoun_count < MIN_PRONOUNS


# =============================================================================
# SCORER
# =============================================================================

def analyze_text_for_ai(text) -> AiTextAnalysis:
    """
    Analyze text for potential AI generation.

    Args:
        text: The pasted or newly added text. None and non-string values
              are coerced to text.

    Returns:
        AiTextAnalysis with is_likely_ai, confidence (0-1) and the ordered
        list of reasons for every heuristic that fired.
    """
    text = _coerce_text(text)

    # Skip very short text
    if len(text) < MIN_TEXT_LENGTH:
        return AiTextAnalysis(is_likely_ai=False, confidence=0.0, reasons=[])

    reasons = []
    score = 0.0

    for phrase in _matched_phrases(text):
        score += PHRASE_WEIGHT
        reasons.append(REASON_PHRASE.format(phrase=phrase))

    if _is_overly_structured(text):
        score += STRUCTURE_WEIGHT
        reasons.append(REASON_STRUCTURED)

    if _has_uniform_sentences(text):
        score += UNIFORMITY_WEIGHT
        reasons.append(REASON_UNIFORM)

    # AI often writes impersonally
    if _is_impersonal(text):
        score += IMPERSONAL_WEIGHT
        reasons.append(REASON_IMPERSONAL)

    if len(text) > LONG_TEXT_LENGTH:
        score += LONG_TEXT_WEIGHT
        reasons.append(REASON_LONG)

    confidence = min(score, 1.0)
    return AiTextAnalysis(
        is_likely_ai=confidence >= AI_THRESHOLD,
        confidence=confidence,
        reasons=reasons,
    )
