"""Cleaning of raw model output into a title and story text."""
import re
from typing import List, Sequence, Tuple

from lingostory.models.story_models import WordWithMeaning

DEFAULT_TITLE = "Story"
SENTENCE_END = ".!?"

_MARKDOWN = re.compile(r"[*_`]")
_PARENTHETICAL = re.compile(r"\s*\([^)]+\)")
_HEADING = re.compile(r"^#+\s+.*$", re.MULTILINE)
_SPACES = re.compile(r"[ \t]+")
_BLANK_LINES = re.compile(r"\n\s*\n+")


class ContentCleaner:
    """Removes formatting the model was asked not to produce."""

    def clean(self, raw_content: str) -> Tuple[str, str]:
        """Split raw output into (title, content)."""
        lines = raw_content.split("\n")
        title = self._extract_title(lines)

        content = "\n".join(lines)
        content = _MARKDOWN.sub("", content)
        content = _PARENTHETICAL.sub("", content)
        content = _HEADING.sub("", content)
        content = self._clean_whitespace(content)
        content = self._fix_incomplete_sentence(content)

        return title or DEFAULT_TITLE, content.strip()

    def _extract_title(self, lines: List[str]) -> str:
        # Consumes the title line and the blank line after it
        while lines and not lines[0].strip():
            lines.pop(0)
        if not lines:
            return ""
        title = _MARKDOWN.sub("", lines.pop(0)).strip().lstrip("#").strip()
        if lines and not lines[0].strip():
            lines.pop(0)
        return self._limit_title(title)

    @staticmethod
    def _limit_title(title: str) -> str:
        three_words = " ".join(title.split()[:3])
        if len(three_words) > 20:
            return f"{three_words[:18]}..."
        return three_words

    @staticmethod
    def _clean_whitespace(text: str) -> str:
        lines = [_SPACES.sub(" ", line).strip() for line in text.split("\n")]
        return _BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()

    @staticmethod
    def _fix_incomplete_sentence(text: str) -> str:
        text = text.rstrip()
        if not text or text[-1] in SENTENCE_END:
            return text
        last = max(text.rfind(mark) for mark in SENTENCE_END)
        if last >= 0:
            return text[:last + 1]
        return f"{text}."


def extract_used_words(
    content: str,
    candidates: Sequence[WordWithMeaning],
) -> Tuple[WordWithMeaning, ...]:
    """Candidates that occur in the content as whole words, case-insensitively."""
    used = []
    for word in candidates:
        pattern = r"(?<!\w)" + re.escape(word.english) + r"(?!\w)"
        if re.search(pattern, content, re.IGNORECASE):
            used.append(word)
    return tuple(used)
