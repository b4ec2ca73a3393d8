"""Tests for prompt building and output cleaning."""
from lingostory.models.story_models import StoryLength, StoryType, WordWithMeaning
from lingostory.services.content_cleaner import DEFAULT_TITLE, ContentCleaner, extract_used_words
from lingostory.services.prompt_builder import PromptBuilder

WORDS = [
    WordWithMeaning(1, "busy", "meşgul"),
    WordWithMeaning(2, "river", "nehir"),
    WordWithMeaning(3, "key", "anahtar"),
]


def test_clean_splits_title_and_content() -> None:
    """Test title extraction from the first line."""
    title, content = ContentCleaner().clean("Coffee Break Talk\n\nAli: Bugün çok busy bir gün.")
    assert title == "Coffee Break Talk"
    assert content == "Ali: Bugün çok busy bir gün."


def test_clean_limits_title() -> None:
    """Test that titles keep at most three words and 20 characters."""
    cleaner = ContentCleaner()
    assert cleaner.clean("One Two Three Four\n\nText.")[0] == "One Two Three"
    assert cleaner.clean("Extraordinary Wonderful Journey\n\nText.")[0] == "Extraordinary Wond..."


def test_clean_strips_formatting() -> None:
    """Test removal of markdown, headings and translations."""
    raw = "**Nehir Yolu**\n\n## Bölüm\nKüçük **river** (nehir) boyunca   yürüdük.\n\n\n\nSonra *key* bulduk."
    title, content = ContentCleaner().clean(raw)

    assert title == "Nehir Yolu"
    assert content == "Küçük river boyunca yürüdük.\n\nSonra key bulduk."


def test_clean_trims_incomplete_sentence() -> None:
    """Test that a cut-off last sentence is dropped."""
    _, content = ContentCleaner().clean("Title\n\nBirinci cümle bitti. İkinci cümle yarım")
    assert content == "Birinci cümle bitti."

    _, content = ContentCleaner().clean("Title\n\nNoktasız tek cümle")
    assert content == "Noktasız tek cümle."


def test_clean_empty_input() -> None:
    """Test the default title."""
    title, content = ContentCleaner().clean("\n\n")
    assert title == DEFAULT_TITLE
    assert content == ""


def test_extract_used_words_matches_whole_words() -> None:
    """Test case-insensitive whole-word matching."""
    used = extract_used_words("The River was calm. Nobody was busy.", WORDS)
    assert used == (WORDS[0], WORDS[1])

    # "keyboard" must not count as "key"
    assert extract_used_words("A keyboard.", WORDS) == ()


def test_prompt_contains_words_and_topic() -> None:
    """Test the prompt content."""
    prompt = PromptBuilder().build(WORDS, "a lost key", StoryType.FANTASY, StoryLength.SHORT)

    assert "Use the following English words:\nbusy, river, key" in prompt
    assert "Topic: a lost key" in prompt
    assert StoryType.FANTASY.prompt_instruction in prompt
    assert str(StoryLength.SHORT.target_word_count) in prompt
    assert "CONTENT RULES" in prompt


def test_prompt_without_topic() -> None:
    """Test that an empty topic is omitted."""
    prompt = PromptBuilder().build(WORDS, None, StoryType.MOTIVATION, StoryLength.MEDIUM)
    assert "Topic:" not in prompt
    assert "EXAMPLE" not in prompt


def test_dialogue_prompt_has_example() -> None:
    """Test the dialogue format example."""
    prompt = PromptBuilder().build(WORDS, None, StoryType.DIALOGUE, StoryLength.SHORT)
    assert "EXAMPLE" in prompt
