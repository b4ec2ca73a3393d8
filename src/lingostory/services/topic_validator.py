"""Local validation of user-supplied story topics."""
import re
import unicodedata
from typing import Optional

from lingostory.errors import TopicRejectedError

MIN_TOPIC_LENGTH = 2
MAX_TOPIC_LENGTH = 100

BLOCKED_KEYWORDS = frozenset({
    # sexual content
    "seks", "sex", "porno", "porn", "naked", "nude", "ciplak",
    # violence and drugs
    "oldur", "kill", "cinayet", "murder", "tecavuz", "rape", "iskence", "torture",
    "bomba", "bomb", "uyusturucu", "drug", "kokain", "eroin",
    # slurs and swearing
    "orospu", "kahpe", "bitch", "whore", "fuck", "shit",
})

SUSPICIOUS_PATTERNS = (
    re.compile(r"(.)\1{4,}"),  # spam like "aaaaa"
    re.compile(r"[!?.]{5,}"),
    re.compile(r"https?://"),
    re.compile(r"www\."),
    re.compile(r"\.(com|net|org)\b"),
)

REASON_MESSAGES = {
    "inappropriate_content": "Please enter an appropriate topic. Stories must be suitable for children.",
    "suspicious_pattern": "Invalid content detected. Please enter a normal topic.",
    "too_long": f"The topic is too long (max {MAX_TOPIC_LENGTH} characters).",
    "too_short": f"The topic is too short (at least {MIN_TOPIC_LENGTH} characters).",
}


def _normalize(text: str) -> str:
    # Strip diacritics so "öldür" matches "oldur"
    decomposed = unicodedata.normalize("NFKD", text.lower().replace("ı", "i"))
    return "".join(char for char in decomposed if not unicodedata.combining(char))


class TopicValidator:
    """Rejects unsuitable topics before any tokens are spent."""

    def sanitize(self, topic: Optional[str]) -> Optional[str]:
        """Collapse whitespace; empty topics become None."""
        if topic is None:
            return None
        cleaned = re.sub(r"\s+", " ", topic).strip()
        return cleaned or None

    def rejection_reason(self, topic: Optional[str]) -> Optional[str]:
        if topic is None or not topic.strip():
            return None

        normalized = _normalize(topic)
        words = re.findall(r"\w+", normalized)
        # Prefix match catches suffixed forms like "öldürmek"
        if any(word.startswith(keyword) for word in words for keyword in BLOCKED_KEYWORDS):
            return "inappropriate_content"
        if any(pattern.search(normalized) for pattern in SUSPICIOUS_PATTERNS):
            return "suspicious_pattern"
        if len(topic) > MAX_TOPIC_LENGTH:
            return "too_long"
        if len(topic.strip()) < MIN_TOPIC_LENGTH:
            return "too_short"
        return None

    def validate(self, topic: Optional[str]) -> Optional[str]:
        """Return the sanitized topic or raise TopicRejectedError."""
        cleaned = self.sanitize(topic)
        reason = self.rejection_reason(cleaned)
        if reason:
            raise TopicRejectedError(reason, REASON_MESSAGES[reason])
        return cleaned
