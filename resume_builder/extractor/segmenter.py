"""Job posting segmentation.

Splits raw posting text into sentence- and clause-level phrases, tracking
which section heading each phrase appeared under.
"""

from __future__ import annotations

import re

from resume_builder.extractor.models import Phrase, SectionKind

# Order matters: "preferred qualifications" must hit PREFERRED before the
# plain "qualifications" pattern.
_SECTION_PATTERNS: list[tuple[SectionKind, re.Pattern[str]]] = [
    (
        SectionKind.IGNORED,
        re.compile(
            r"\b(benefits|perks|about (us|the company|the team)|who we are|"
            r"compensation|salary|our values|why join|what we offer|how to apply|"
            r"equal opportunity|eeo)\b"
        ),
    ),
    (
        SectionKind.PREFERRED,
        re.compile(
            r"\b(preferred|nice[ -]to[ -]haves?|bonus( points)?|pluses|"
            r"good[ -]to[ -]haves?|desired|extra credit)\b"
        ),
    ),
    (
        SectionKind.RESPONSIBILITIES,
        re.compile(
            r"\b(responsibilities|what you('ll| will) do|the role|duties|"
            r"your impact|day[ -]to[ -]day|in this role)\b"
        ),
    ),
    (
        SectionKind.MUST_HAVE,
        re.compile(
            r"\b(requirements|required|qualifications|must[ -]haves?|"
            r"what you('ll)? bring|what we('re| are) looking for|who you are|"
            r"about you|you have|skills)\b"
        ),
    ),
]

_BULLET = re.compile(r"^\s*(?:[-*•·・▪‣◦>]+|\d{1,2}[.)](?=\s))\s*")
# Latin sentences end before a capital, digit or non-ASCII letter (lowercase
# after "e.g." stays joined); CJK full stops end a sentence outright.
_SENTENCE_BOUNDARY = re.compile(
    r"(?<=[.!?])\s+(?=[^\W_a-z]|[(\"'])|(?<=[\u3002\uff01\uff1f])\s*"
)
_CLAUSE_SEPARATOR = re.compile(r"[;\uff1b]")
_HAS_LETTER = re.compile(r"[^\W\d_]")
_COLONS = ":\uff1a"


_HEADING_FILLER = {
    "a",
    "about",
    "and",
    "the",
    "our",
    "your",
    "key",
    "core",
    "main",
    "minimum",
    "basic",
    "additional",
    "technical",
    "job",
    "role",
    "position",
    "skills",
    "qualifications",
    "requirements",
    "experience",
    "responsibilities",
    "preferred",
    "required",
    "desired",
}


def normalize_text(raw_text: str) -> str:
    """Normalize line endings and non-breaking spaces."""
    text = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    return text.replace("\u00a0", " ").replace("\t", " ")


def classify_heading(line: str, max_words: int = 6) -> SectionKind | None:
    """Return the section kind if `line` looks like a section heading.

    A heading is a short line that either ends with a colon or consists of
    nothing but a known section name (plus filler words like "key" or
    "minimum"). Short colon-terminated lines that name no known section
    reset to NEUTRAL.
    """
    stripped = line.strip().strip("#*_ ").strip()
    if not stripped or len(stripped.split()) > max_words:
        return None

    ends_with_colon = stripped.endswith(tuple(_COLONS))
    label = stripped.rstrip(_COLONS).strip().lower()

    for kind, pattern in _SECTION_PATTERNS:
        match = pattern.search(label)
        if match is None:
            continue
        if ends_with_colon:
            return kind
        matched_words = set(re.findall(r"[a-z']+", match.group(0)))
        leftover = [
            word
            for word in re.findall(r"[a-z']+", label)
            if word not in matched_words and word not in _HEADING_FILLER
        ]
        return None if leftover else kind

    if ends_with_colon:
        return SectionKind.NEUTRAL
    return None


def _clean_fragment(fragment: str) -> str:
    fragment = re.sub(r"\s+", " ", fragment).strip()
    return fragment.strip(" ,;:-\uff0c\uff1b\uff1a\u3001").strip()


def split_phrases(line: str) -> list[str]:
    """Split one line into sentence- and clause-level fragments."""
    phrases: list[str] = []
    for sentence in _SENTENCE_BOUNDARY.split(line):
        for clause in _CLAUSE_SEPARATOR.split(sentence):
            cleaned = _clean_fragment(clause)
            if cleaned and _HAS_LETTER.search(cleaned):
                phrases.append(cleaned)
    return phrases


def segment(raw_text: str, max_heading_words: int = 6) -> list[Phrase]:
    """Segment posting text into ordered candidate phrases.

    Phrases under ignored sections (benefits, about us, ...) are dropped.
    Positions count the phrases that were kept, starting at 0.
    """
    phrases: list[Phrase] = []
    section = SectionKind.NEUTRAL

    for raw_line in normalize_text(raw_text).split("\n"):
        line = _BULLET.sub("", raw_line).strip()
        if not line:
            continue

        heading = classify_heading(line, max_heading_words)
        if heading is not None:
            section = heading
            continue

        if section == SectionKind.IGNORED:
            continue

        for text in split_phrases(line):
            phrases.append(Phrase(text=text, position=len(phrases), section=section))

    return phrases
