"""Command line entry point."""
import asyncio
import sys
from typing import List, Optional, Sequence

import click

from lingostory.app import StoryApp
from lingostory.logging_config import setup_logging
from lingostory.models.events import (
    DeleteStory,
    GenerateStory,
    LoadData,
    OpenStory,
    StoryEvent,
    ToggleFavorite,
)
from lingostory.models.models import Word
from lingostory.models.story_models import GeneratedStory, StoryLength, StoryRequest, StoryState, StoryType


def parse_word_pairs(pairs: List[str]) -> List[Word]:
    """Parse "english:turkish" arguments."""
    words = []
    for pair in pairs:
        english, sep, turkish = pair.partition(":")
        if not sep or not english.strip() or not turkish.strip():
            raise ValueError(f"Invalid word pair: {pair!r}")
        words.append(Word(english=english.strip(), turkish=turkish.strip()))
    return words


def dispatch(app: StoryApp, event: Optional[StoryEvent] = None) -> StoryState:
    """Load the learner's data, apply one event and report errors."""

    async def _run() -> StoryState:
        controller = app.start()
        state = await controller.handle(LoadData())
        if event is not None:
            state = await controller.handle(event)
        return state

    state = asyncio.run(_run())
    if state.error is not None:
        click.echo(f"Error: {state.error.message}", err=True)
        sys.exit(1)
    return state


def echo_story(story: GeneratedStory) -> None:
    click.echo(story.title)
    click.echo()
    click.echo(story.content)
    click.echo()
    click.echo("Words: " + ", ".join(f"{word.english} ({word.turkish})" for word in story.used_words))


def echo_history(stories: Sequence[GeneratedStory]) -> None:
    if not stories:
        click.echo("No stories found.")
        return
    for story in stories:
        star = "*" if story.is_favorite else " "
        click.echo(f"{star} {story.id}  {story.created_at:%Y-%m-%d}  {story.title}")
        click.echo(f"    {story.preview}")


def echo_quota(state: StoryState) -> None:
    if state.quota is not None:
        click.echo(f"Stories left this month: {state.quota.display_text}")


@click.group()
@click.option("--user", default="default", help="Learner username (default: default)")
@click.option("--provider", type=click.Choice(["gemini", "faker"]), help="Story provider")
@click.pass_context
def cli(ctx: click.Context, user: str, provider: Optional[str]) -> None:
    """Generate short stories from the words you are learning."""
    setup_logging("Starting lingostory ...")
    app = StoryApp(user, provider_name=provider)
    ctx.obj = app
    ctx.call_on_close(app.stop)


@cli.command()
@click.option("--type", "story_type", type=click.Choice([t.value for t in StoryType]),
              default=StoryType.MOTIVATION.value, help="Story type (default: motivation)")
@click.option("--length", type=click.Choice([l.value for l in StoryLength]),
              default=StoryLength.SHORT.value, help="Story length (default: short)")
@click.option("--topic", type=str, help="Optional story topic")
@click.pass_obj
def generate(app: StoryApp, story_type: str, length: str, topic: Optional[str]) -> None:
    """Generate a new story."""
    request = StoryRequest(type=StoryType(story_type), length=StoryLength(length), topic=topic)
    state = dispatch(app, GenerateStory(request))
    echo_story(state.current_story)
    echo_quota(state)


@cli.command("list")
@click.option("--favorites", is_flag=True, help="Only favorite stories")
@click.option("--type", "story_type", type=click.Choice([t.value for t in StoryType]),
              help="Only stories of this type")
@click.pass_obj
def list_stories(app: StoryApp, favorites: bool, story_type: Optional[str]) -> None:
    """List stored stories, newest first."""
    if favorites and story_type:
        raise click.UsageError("--favorites and --type cannot be combined")
    state = dispatch(app)
    store = app.controller.store
    if favorites:
        stories = store.favorites()
    elif story_type:
        stories = store.by_type(StoryType(story_type))
    else:
        stories = state.stories
    echo_history(stories)
    echo_quota(state)


@cli.command()
@click.argument("story_id")
@click.pass_obj
def show(app: StoryApp, story_id: str) -> None:
    """Print a story."""
    state = dispatch(app, OpenStory(story_id))
    if state.current_story is None:
        click.echo(f"Error: Story '{story_id}' not found.", err=True)
        sys.exit(1)
    echo_story(state.current_story)


@cli.command()
@click.argument("story_id")
@click.pass_obj
def favorite(app: StoryApp, story_id: str) -> None:
    """Toggle the favorite flag of a story."""
    echo_history(dispatch(app, ToggleFavorite(story_id)).stories)


@cli.command()
@click.argument("story_id")
@click.option("--confirm/--no-confirm", default=False, help="Skip confirmation prompt")
@click.pass_obj
def delete(app: StoryApp, story_id: str, confirm: bool) -> None:
    """Delete a story."""
    if not confirm and not click.confirm(f"Delete story {story_id}?"):
        click.echo("Deletion cancelled.")
        return
    dispatch(app, DeleteStory(story_id))
    click.echo(f"Deleted story '{story_id}'")


@cli.command()
@click.pass_obj
def quota(app: StoryApp) -> None:
    """Show the remaining quota and when it resets."""
    echo_quota(dispatch(app))
    days = app.controller.quota.days_until_reset()
    click.echo(f"Resets in {days} day{'' if days == 1 else 's'}")


@cli.command("add-words")
@click.argument("pairs", nargs=-1, required=True)
@click.pass_obj
def add_words(app: StoryApp, pairs: List[str]) -> None:
    """Add english:turkish word pairs to the deck."""
    try:
        words = parse_word_pairs(list(pairs))
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="PAIRS")
    app.start()
    app.learner.add_words(words)
    click.echo(f"Added {len(words)} words")


@cli.command()
@click.argument("status", type=click.Choice(["on", "off"]))
@click.pass_obj
def premium(app: StoryApp, status: str) -> None:
    """Switch premium status."""
    app.start()
    app.learner.set_premium(status == "on")
    echo_quota(dispatch(app))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
