"""Prompt construction for story generation."""
from typing import Optional, Sequence

from lingostory.models.story_models import StoryLength, StoryType, WordWithMeaning

SAFETY_RULES = """
CONTENT RULES:
- The story must be suitable for children, educational and positive
- No violence, sexual content, drugs or hate speech
- Stay within legal and ethical limits"""

FORMAT_RULES = """
FORMAT:
FIRST LINE: a three-word title that fits the story (only the title)
SECOND LINE: empty
FROM THE THIRD LINE: the story"""

WORD_RULES = """
WORD RULES:
1. Keep the listed words in English inside the Turkish text
2. No formatting: no markdown, no translations in parentheses
3. The English words must flow naturally in the sentences
4. Use every word at least once
5. End every sentence with a period, exclamation or question mark"""

DIALOGUE_EXAMPLE = """
EXAMPLE:
Coffee Break Talk

Ali: Bugün çok busy bir gün geçirdim.
Ayşe: Anladım, ben de aynı şekilde..."""


class PromptBuilder:
    """Builds model prompts from a story request and its words."""

    def build(
        self,
        words: Sequence[WordWithMeaning],
        topic: Optional[str],
        story_type: StoryType,
        length: StoryLength,
    ) -> str:
        """Build the prompt for one story."""
        word_list = ", ".join(word.english for word in words)
        topic_part = f"Topic: {topic}\n\n" if topic else ""

        sections = [
            f"You are a story writer. In Turkish, {story_type.prompt_instruction}. "
            f"Use about {length.target_word_count} words.",
            FORMAT_RULES,
            f"\n{topic_part}Use the following English words:\n{word_list}",
            WORD_RULES,
        ]
        if story_type == StoryType.DIALOGUE:
            sections.append(DIALOGUE_EXAMPLE)
        sections.append(SAFETY_RULES)
        sections.append("\nSTART NOW:")
        return "\n".join(sections)
