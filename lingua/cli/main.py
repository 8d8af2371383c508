"""
Typer CLI for lingua-cards.

Commands:
    lingua db init              - Initialize database tables
    lingua cards add            - Add a card (optionally with AI enrichment)
    lingua cards list           - List cards with filters
    lingua cards show ID        - Show one card with exercise scores
    lingua cards delete ID      - Delete a card
    lingua cards archive ID     - Toggle archived state
    lingua cards favorite ID    - Toggle favorite state
    lingua cards import FILE    - Import cards from JSON
    lingua cards export FILE    - Export cards to JSON
    lingua cards stats          - Deck statistics
    lingua cards duplicates     - Find likely duplicate cards
    lingua practice             - Interactive practice session
    lingua due                  - Show due cards
    lingua streak show          - Show the learning streak
    lingua streak reset         - Reset the current streak
    lingua icons search QUERY   - Search Iconify icons
    lingua enrich WORD          - Look up grammar for a word with AI
    lingua prefs show           - Show enabled exercise types
    lingua prefs toggle TYPE    - Enable/disable an exercise type
    lingua prefs order          - Weakest-first or shuffled order
    lingua info                 - Show configuration
    lingua version              - Show version

Usage:
    lingua --help
    lingua cards add Hund dog --language de --category animals
    lingua practice --language de
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from config import get_settings
from lingua import __version__
from lingua.core.errors import LinguaError
from lingua.core.exercise_type import ExerciseCategory, ExerciseType
from lingua.core.mastery import MasteryLevel
from lingua.db import database
from lingua.duplicates.detector import DuplicateDetectionConfig, DuplicateDetector
from lingua.enrichment.enricher import WordEnricher
from lingua.integrations.ai_clients import AiService
from lingua.integrations.iconify_client import IconifyClient
from lingua.review.practice_session import PracticeSession
from lingua.services.card_service import CardFilter, CardService
from lingua.services.preferences_service import PreferencesService
from lingua.services.streak_service import StreakService

app = typer.Typer(
    help="lingua-cards CLI: language flashcards with per-exercise spaced repetition",
    no_args_is_help=True,
)

console = Console()


def configure_logging(level: str, log_file: str | None) -> None:
    """Route loguru output to stderr and an optional rotating file."""
    logger.remove()
    logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> | {message}")
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level="DEBUG", rotation="10 MB", retention=5)


@app.callback()
def main_callback(
    db_url: str | None = typer.Option(None, "--db", help="Database URL (overrides DATABASE_URL)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    """lingua-cards: practice vocabulary with spaced repetition."""
    settings = get_settings()
    configure_logging("DEBUG" if verbose else "WARNING", settings.log_file)
    if db_url:
        database.configure_database(db_url)
    database.init_db()


def _fail(message: str) -> None:
    rprint(f"[red]✗[/red] {message}")
    raise typer.Exit(code=1)


def _card_service(session) -> CardService:
    settings = get_settings()
    return CardService(session, settings.user_id, policy=settings.get_scheduling_policy())


def _parse_exercise_type(value: str) -> ExerciseType:
    exercise_type = ExerciseType.from_value(value.replace("-", "_"))
    if exercise_type is None:
        valid = ", ".join(t.value for t in ExerciseType)
        _fail(f"Unknown exercise type '{value}'. Valid: {valid}")
    return exercise_type


# ========================================
# DATABASE COMMANDS
# ========================================

db_app = typer.Typer(help="Database management")
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """
    Initialize database tables.

    Safe to run multiple times (idempotent).
    """
    database.init_db()
    rprint("[green]✓[/green] Database initialized!")


# ========================================
# CARD COMMANDS
# ========================================

cards_app = typer.Typer(help="Create, browse and manage cards")
app.add_typer(cards_app, name="cards")


@cards_app.command("add")
def cards_add(
    front: str = typer.Argument(..., help="Word or phrase in the learned language"),
    back: str = typer.Argument(..., help="Translation"),
    language: str | None = typer.Option(None, "--language", "-l", help="Language code (default: active language)"),
    category: str | None = typer.Option(None, "--category", "-c", help="Category (default: from config)"),
    tags: list[str] = typer.Option([], "--tag", "-t", help="Tag (repeatable)"),
    examples: list[str] = typer.Option([], "--example", "-e", help="Example sentence (repeatable)"),
    notes: str | None = typer.Option(None, "--notes", help="Free-form notes"),
    difficulty: int = typer.Option(1, "--difficulty", "-d", help="Difficulty 1-5"),
    article: str | None = typer.Option(None, "--article", help="German article (der/die/das)"),
    enrich: bool = typer.Option(False, "--enrich", help="Fill grammar data with AI"),
    strict: bool = typer.Option(False, "--strict", help="Refuse exact duplicates"),
) -> None:
    """Add a card."""
    settings = get_settings()
    language = language or settings.active_language
    if not language:
        _fail("No language given and ACTIVE_LANGUAGE is not set")

    word_data = None
    if enrich:
        with database.session_scope() as session:
            ai_config = PreferencesService(session, settings.user_id).load_ai_config()
        try:
            result = asyncio.run(_enrich(ai_config, front, language))
        except LinguaError as e:
            _fail(str(e))
        word_data = result.word_data
        article = article or result.german_article
        examples = examples or result.examples
        notes = notes or result.notes

    try:
        with database.session_scope() as session:
            creation = _card_service(session).create_card(
                front_text=front,
                back_text=back,
                language=language,
                category=category or settings.default_category,
                tags=tags,
                examples=examples,
                notes=notes,
                word_data=word_data,
                difficulty=difficulty,
                german_article=article,
                reject_exact_duplicates=strict,
            )
    except LinguaError as e:
        _fail(str(e))

    rprint(f"[green]✓[/green] Added card [bold]{creation.card.front_text}[/bold] ({creation.card.id})")
    for match in creation.duplicates:
        rprint(
            f"  [yellow]⚠[/yellow] Possible duplicate: {match.duplicate_card.front_text} -> "
            f"{match.duplicate_card.back_text} ({match.reason})"
        )


@cards_app.command("list")
def cards_list(
    search: str = typer.Option("", "--search", "-s", help="Search front, back, category and tags"),
    language: str | None = typer.Option(None, "--language", "-l"),
    category: str | None = typer.Option(None, "--category", "-c"),
    tags: list[str] = typer.Option([], "--tag", "-t", help="Require tag (repeatable)"),
    due: bool = typer.Option(False, "--due", help="Only cards due for review"),
    favorites: bool = typer.Option(False, "--favorites", help="Only favorites"),
    archived: bool = typer.Option(False, "--archived", help="Include archived cards"),
    limit: int = typer.Option(50, "--limit", "-n", help="Max rows to show"),
) -> None:
    """List cards."""
    criteria = CardFilter(
        search=search,
        category=category,
        language=language,
        tags=tags,
        due_only=due,
        favorites_only=favorites,
        include_archived=archived,
    )
    with database.session_scope() as session:
        cards = _card_service(session).filtered_cards(criteria)

    if not cards:
        rprint("[yellow]No cards found[/yellow]")
        return

    table = Table(title=f"Cards ({len(cards)})")
    table.add_column("ID", style="dim")
    table.add_column("Front", style="bold")
    table.add_column("Back")
    table.add_column("Lang")
    table.add_column("Category", style="cyan")
    table.add_column("Mastery")
    table.add_column("Next review", style="dim")
    for card in cards[:limit]:
        level = card.overall_mastery_level
        flags = ("★ " if card.is_favorite else "") + ("[dim](archived)[/dim] " if card.is_archived else "")
        table.add_row(
            card.id[:8],
            flags + card.front_text,
            card.back_text,
            card.language,
            card.category,
            f"[{level.color}]{level.emoji} {level.display_name}[/{level.color}]",
            card.next_review.strftime("%Y-%m-%d %H:%M") if card.next_review else "now",
        )
    console.print(table)
    if len(cards) > limit:
        rprint(f"[dim]... {len(cards) - limit} more (use --limit)[/dim]")


def _resolve_card_id(service: CardService, card_id: str) -> str:
    """Accept a full id or a unique prefix (as shown by `cards list`)."""
    if service.repository.get(card_id) is not None:
        return card_id
    matches = [c.id for c in service.all_cards() if c.id.startswith(card_id)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        _fail(f"Ambiguous card id prefix: {card_id}")
    return card_id


@cards_app.command("show")
def cards_show(card_id: str = typer.Argument(..., help="Card id or prefix")) -> None:
    """Show a card with its exercise scores."""
    try:
        with database.session_scope() as session:
            service = _card_service(session)
            card = service.get_card(_resolve_card_id(service, card_id))
    except LinguaError as e:
        _fail(str(e))

    lines = [
        f"[bold]{card.front_text}[/bold] → {card.back_text}",
        f"Language: {card.language}   Category: {card.category}   Difficulty: {card.difficulty}",
    ]
    if card.resolved_article:
        lines.append(f"Article: {card.resolved_article}")
    if card.tags:
        lines.append(f"Tags: {', '.join(card.tags)}")
    for example in card.examples:
        lines.append(f"[italic]“{example}”[/italic]")
    if card.word_data:
        for label, form in card.word_data.inflected_forms().items():
            lines.append(f"{label}: {form}")
    if card.notes:
        lines.append(f"[dim]{card.notes}[/dim]")
    console.print(Panel("\n".join(lines), title=card.id))

    table = Table(title="Exercise scores")
    table.add_column("Exercise")
    table.add_column("Correct", justify="right")
    table.add_column("Incorrect", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Mastery")
    table.add_column("Next review", style="dim")
    for exercise_type, score in sorted(card.exercise_scores.items(), key=lambda item: item[0].value):
        level = score.mastery_level()
        table.add_row(
            exercise_type.display_name,
            str(score.correct_count),
            str(score.incorrect_count),
            str(score.current_streak),
            f"[{level.color}]{level.display_name}[/{level.color}]",
            score.next_review.strftime("%Y-%m-%d %H:%M") if score.next_review else "now",
        )
    console.print(table)


@cards_app.command("delete")
def cards_delete(
    card_id: str = typer.Argument(..., help="Card id or prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a card."""
    if not yes and not Confirm.ask(f"Delete card {card_id}?"):
        raise typer.Exit()
    try:
        with database.session_scope() as session:
            service = _card_service(session)
            service.delete_card(_resolve_card_id(service, card_id))
    except LinguaError as e:
        _fail(str(e))
    rprint("[green]✓[/green] Card deleted")


@cards_app.command("archive")
def cards_archive(card_id: str = typer.Argument(..., help="Card id or prefix")) -> None:
    """Toggle a card's archived state."""
    try:
        with database.session_scope() as session:
            service = _card_service(session)
            card = service.toggle_archive(_resolve_card_id(service, card_id))
    except LinguaError as e:
        _fail(str(e))
    rprint(f"[green]✓[/green] {card.front_text}: {'archived' if card.is_archived else 'restored'}")


@cards_app.command("favorite")
def cards_favorite(card_id: str = typer.Argument(..., help="Card id or prefix")) -> None:
    """Toggle a card's favorite state."""
    try:
        with database.session_scope() as session:
            service = _card_service(session)
            card = service.toggle_favorite(_resolve_card_id(service, card_id))
    except LinguaError as e:
        _fail(str(e))
    rprint(f"[green]✓[/green] {card.front_text}: {'★ favorite' if card.is_favorite else 'not a favorite'}")


@cards_app.command("import")
def cards_import(path: Path = typer.Argument(..., help="JSON file with a list of cards")) -> None:
    """
    Import cards from JSON.

    Accepts exported cards or simple rows with front, back, language and
    category keys. Invalid rows are skipped.
    """
    if not path.exists():
        _fail(f"File not found: {path}")
    try:
        rows = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON: {e}")
    if isinstance(rows, dict):
        rows = rows.get("cards", [])
    if not isinstance(rows, list):
        _fail("Expected a JSON list of cards")

    with database.session_scope() as session:
        result = _card_service(session).import_cards(rows)

    rprint(f"[green]✓[/green] Imported {result.imported} cards")
    if result.skipped:
        rprint(f"[yellow]⚠[/yellow] Skipped {result.skipped} rows")
        for error in result.errors[:10]:
            rprint(f"  [dim]{error}[/dim]")


@cards_app.command("export")
def cards_export(
    path: Path = typer.Argument(Path("cards_export.json"), help="Output file"),
    language: str | None = typer.Option(None, "--language", "-l"),
) -> None:
    """Export cards to JSON."""
    with database.session_scope() as session:
        data = _card_service(session).export_cards(language)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    rprint(f"[green]✓[/green] Exported {len(data)} cards to {path}")


@cards_app.command("stats")
def cards_stats(language: str | None = typer.Option(None, "--language", "-l")) -> None:
    """Show deck statistics."""
    with database.session_scope() as session:
        stats = _card_service(session).statistics(language)

    table = Table(title="Deck statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total cards", str(stats.total))
    table.add_row("Active", str(stats.active))
    table.add_row("Archived", str(stats.archived))
    table.add_row("Favorites", str(stats.favorites))
    table.add_row("Due now", str(stats.due))
    table.add_row("Average success", f"{stats.average_success_rate:.0f}%")
    for code, count in sorted(stats.by_language.items()):
        table.add_row(f"Language {code}", str(count))
    console.print(table)

    mastery = Table(title="Mastery")
    mastery.add_column("Level")
    mastery.add_column("Cards", justify="right")
    for level in MasteryLevel:
        mastery.add_row(f"[{level.color}]{level.emoji} {level.display_name}[/{level.color}]", str(stats.mastery[level.value]))
    console.print(mastery)
    if stats.categories:
        rprint(f"Categories: {', '.join(stats.categories)}")
    if stats.tags:
        rprint(f"Tags: {', '.join(stats.tags[:20])}")


@cards_app.command("duplicates")
def cards_duplicates(
    preset: str = typer.Option("standard", "--preset", "-p", help="standard, strict or loose"),
    language: str | None = typer.Option(None, "--language", "-l"),
) -> None:
    """Find likely duplicate cards."""
    try:
        config = DuplicateDetectionConfig.preset(preset)
    except ValueError as e:
        _fail(str(e))
    with database.session_scope() as session:
        service = _card_service(session)
        service.detector = DuplicateDetector(config)
        cards = {c.id: c for c in service.all_cards(language)}
        found = service.find_duplicates(language)

    if not found:
        rprint("[green]✓[/green] No duplicates found")
        return
    table = Table(title=f"Possible duplicates ({len(found)} cards)")
    table.add_column("Card", style="bold")
    table.add_column("Duplicate")
    table.add_column("Score", justify="right")
    table.add_column("Reason", style="dim")
    for card_id, matches in found.items():
        card = cards[card_id]
        for match in matches:
            table.add_row(
                f"{card.front_text} → {card.back_text}",
                f"{match.duplicate_card.front_text} → {match.duplicate_card.back_text}",
                f"{match.similarity_score:.2f}",
                match.reason,
            )
    console.print(table)


# ========================================
# PRACTICE COMMANDS
# ========================================


def _ask_exercise(session: PracticeSession) -> bool | None:
    """Present the current exercise and grade the learner's response."""
    prepared = session.current_exercise
    exercise_type = prepared.exercise_type
    console.print(f"\n[bold cyan]{exercise_type.display_name}[/bold cyan] [dim]({exercise_type.description})[/dim]")

    if exercise_type is ExerciseType.READING_RECOGNITION:
        console.print(Panel(prepared.prompt, expand=False))
        Prompt.ask("[dim]Press Enter to reveal[/dim]", default="", show_default=False)
        console.print(f"→ [bold]{prepared.expected_answer}[/bold]")
        session.check_answer("")
        return Confirm.ask("Did you know it?")

    if prepared.options:
        console.print(Panel(prepared.prompt, expand=False))
        labels = prepared.options
        if prepared.icon_options:
            labels = [f"{icon.name} ({icon.set})" for icon in prepared.icon_options]
        for index, label in enumerate(labels, start=1):
            console.print(f"  {index}. {label}")
        raw = Prompt.ask("Your choice")
        response = raw
        if raw.strip().isdigit() and 1 <= int(raw) <= len(prepared.options):
            response = prepared.options[int(raw) - 1]
        return session.check_answer(response)

    if prepared.scrambled_words:
        console.print(Panel(prepared.prompt, expand=False))
        console.print("Words: " + "  ".join(f"[bold]{w}[/bold]" for w in prepared.scrambled_words))
        return session.check_answer(Prompt.ask("Sentence"))

    console.print(Panel(prepared.prompt, expand=False))
    return session.check_answer(Prompt.ask("Answer"))


@app.command("practice")
def practice(
    language: str | None = typer.Option(None, "--language", "-l", help="Language to practice"),
    limit: int = typer.Option(20, "--limit", "-n", help="Max exercises in the session"),
) -> None:
    """Start an interactive practice session over due cards."""
    settings = get_settings()
    language = language if language is not None else settings.active_language

    with database.session_scope() as db:
        card_service = _card_service(db)
        preferences = PreferencesService(db, settings.user_id).load_preferences()
        if not preferences.has_any_enabled:
            _fail("No exercise types enabled. Use `lingua prefs toggle` to enable some.")

        all_cards = card_service.all_cards()
        session = PracticeSession(
            cards=all_cards,
            preferences=preferences,
            language=language,
            policy=settings.get_scheduling_policy(),
            on_card_updated=card_service.save_card,
            min_cards_for_multiple_choice=settings.min_cards_for_multiple_choice,
        )
        if not session.start():
            rprint("[green]✓[/green] Nothing due. Come back later!")
            return
        session.queue = session.queue[:limit]

        try:
            while session.is_active:
                verdict = _ask_exercise(session)
                prepared = session.current_exercise
                if prepared.is_self_graded:
                    pass
                elif verdict:
                    rprint("[green]✓ Correct![/green]")
                else:
                    rprint(f"[red]✗[/red] Expected: [bold]{prepared.expected_answer}[/bold]")
                session.confirm_and_advance(verdict)
                rprint(f"[dim]{session.remaining} left[/dim]")
        except (KeyboardInterrupt, EOFError):
            session.end()
            rprint("\n[yellow]Session stopped[/yellow]")

        summary = session.summary()
        if summary.cards_reviewed:
            update = StreakService(db, settings.user_id).record_session(summary.cards_reviewed)
            for milestone in update.new_milestones:
                rprint(f"[bold magenta]🏆 {milestone}-day streak milestone![/bold magenta]")
            rprint(update.streak.status_message())

    rprint(
        f"\n[bold]Session complete:[/bold] {summary.correct_count}/{summary.completed_items} correct "
        f"({summary.accuracy:.0f}%), {summary.cards_reviewed} cards"
    )


@app.command("due")
def due(language: str | None = typer.Option(None, "--language", "-l")) -> None:
    """Show cards with exercises due for review."""
    settings = get_settings()
    language = language if language is not None else settings.active_language
    with database.session_scope() as session:
        preferences = PreferencesService(session, settings.user_id).load_preferences()
        cards = [
            c
            for c in _card_service(session).all_cards(language or None)
            if not c.is_archived and c.is_due_for_any_exercise(preferences)
        ]

    if not cards:
        rprint("[green]✓[/green] Nothing due")
        return
    table = Table(title=f"Due cards ({len(cards)})")
    table.add_column("Front", style="bold")
    table.add_column("Back")
    table.add_column("Due exercises", style="cyan")
    for card in cards:
        types = [t.display_name for t in card.due_exercise_types() if preferences.is_enabled(t)]
        table.add_row(card.front_text, card.back_text, ", ".join(types) or "all")
    console.print(table)


# ========================================
# STREAK COMMANDS
# ========================================

streak_app = typer.Typer(help="Daily learning streak")
app.add_typer(streak_app, name="streak")


@streak_app.command("show")
def streak_show(days: int = typer.Option(7, "--days", "-d", help="Days of history to show")) -> None:
    """Show the learning streak."""
    settings = get_settings()
    with database.session_scope() as session:
        service = StreakService(session, settings.user_id)
        stats = service.statistics()
        history = service.daily_review_data(days)

    console.print(
        Panel(
            f"[bold]🔥 {stats['current_streak']} days[/bold] (best {stats['best_streak']})\n"
            f"{stats['status_message']}\n[dim]{stats['motivation_message']}[/dim]",
            title="Streak",
            expand=False,
        )
    )
    table = Table(title=f"Last {days} days")
    table.add_column("Day")
    table.add_column("Cards", justify="right")
    for day, count in history:
        table.add_row(day.isoformat(), str(count) if count else "[dim]-[/dim]")
    console.print(table)
    rprint(
        f"Sessions: {stats['total_review_sessions']}  Cards: {stats['total_cards_reviewed']}  "
        f"Next milestone: {stats['next_milestone'] or '-'}"
    )


@streak_app.command("reset")
def streak_reset(yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation")) -> None:
    """Reset the current streak (history and best streak are kept)."""
    if not yes and not Confirm.ask("Reset your streak?"):
        raise typer.Exit()
    with database.session_scope() as session:
        StreakService(session, get_settings().user_id).reset()
    rprint("[green]✓[/green] Streak reset")


# ========================================
# ICONS & ENRICHMENT
# ========================================

icons_app = typer.Typer(help="Icon search (Iconify)")
app.add_typer(icons_app, name="icons")


async def _search_icons(query: str, limit: int):
    settings = get_settings()
    async with IconifyClient(base_url=settings.iconify_base_url) as client:
        return await client.search_icons(query, limit)


@icons_app.command("search")
def icons_search(
    query: str = typer.Argument(..., help="Search term"),
    limit: int = typer.Option(20, "--limit", "-n"),
) -> None:
    """Search icons to attach to cards."""
    try:
        icons = asyncio.run(_search_icons(query, limit))
    except LinguaError as e:
        _fail(str(e))
    if not icons:
        rprint("[yellow]No icons found[/yellow]")
        return
    table = Table(title=f"Icons for '{query}'")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Set", style="dim")
    for icon in icons:
        table.add_row(icon.id, icon.name, icon.category)
    console.print(table)


async def _enrich(ai_config, word: str, language: str):
    enricher = WordEnricher(ai_config, AiService(timeout_seconds=get_settings().ai_timeout_seconds))
    try:
        return await enricher.enrich(word, language)
    finally:
        await enricher.close()


@app.command("enrich")
def enrich(
    word: str = typer.Argument(..., help="Word to analyze"),
    language: str | None = typer.Option(None, "--language", "-l"),
) -> None:
    """Look up word type, translation and grammar with the configured AI provider."""
    settings = get_settings()
    language = language or settings.active_language or "de"
    with database.session_scope() as session:
        ai_config = PreferencesService(session, settings.user_id).load_ai_config()
    try:
        result = asyncio.run(_enrich(ai_config, word, language))
    except LinguaError as e:
        _fail(str(e))

    lines = [f"[bold]{word}[/bold] ({result.word_type.value}) → {result.translation}"]
    if result.german_article:
        lines.append(f"Article: {result.german_article}")
    if result.word_data:
        for label, form in result.word_data.inflected_forms().items():
            lines.append(f"{label}: {form}")
    for example in result.examples:
        lines.append(f"[italic]“{example}”[/italic]")
    if result.notes:
        lines.append(f"[dim]{result.notes}[/dim]")
    console.print(Panel("\n".join(lines), title="Enrichment", expand=False))


# ========================================
# PREFERENCES
# ========================================

prefs_app = typer.Typer(help="Exercise preferences")
app.add_typer(prefs_app, name="prefs")


@prefs_app.command("show")
def prefs_show() -> None:
    """Show which exercise types are enabled."""
    with database.session_scope() as session:
        preferences = PreferencesService(session, get_settings().user_id).load_preferences()

    for category in ExerciseCategory:
        table = Table(title=category.display_name)
        table.add_column("Exercise")
        table.add_column("Key", style="dim")
        table.add_column("Enabled")
        for exercise_type in (t for t in ExerciseType if t.category is category):
            if not exercise_type.is_implemented:
                status = "[dim]coming soon[/dim]"
            elif preferences.is_enabled(exercise_type):
                status = "[green]✓[/green]"
            else:
                status = "[red]✗[/red]"
            table.add_row(exercise_type.display_name, exercise_type.value, status)
        console.print(table)
    mode = "weakest first" if preferences.prioritize_weaknesses else "shuffled"
    rprint(f"Order: {mode} (weakness threshold {preferences.weakness_threshold:.0f}%)")


@prefs_app.command("toggle")
def prefs_toggle(exercise: str = typer.Argument(..., help="Exercise type key, e.g. multiple_choice_text")) -> None:
    """Enable or disable an exercise type."""
    exercise_type = _parse_exercise_type(exercise)
    if not exercise_type.is_implemented:
        _fail(f"{exercise_type.display_name} is not available yet")
    with database.session_scope() as session:
        service = PreferencesService(session, get_settings().user_id)
        preferences = service.save_preferences(service.load_preferences().toggle_type(exercise_type))
    state = "enabled" if preferences.is_enabled(exercise_type) else "disabled"
    rprint(f"[green]✓[/green] {exercise_type.display_name} {state}")


@prefs_app.command("order")
def prefs_order(weakest_first: bool = typer.Option(True, "--weakest-first/--shuffle")) -> None:
    """Choose between weakest-first and shuffled practice order."""
    with database.session_scope() as session:
        service = PreferencesService(session, get_settings().user_id)
        service.save_preferences(service.load_preferences().with_changes(prioritize_weaknesses=weakest_first))
    rprint(f"[green]✓[/green] Practice order: {'weakest first' if weakest_first else 'shuffled'}")


# ========================================
# INFO COMMANDS
# ========================================


@app.command("info")
def show_info() -> None:
    """Show configuration."""
    settings = get_settings()
    table = Table(title="lingua-cards Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Database URL", settings.database_url)
    table.add_row("User", settings.user_id)
    table.add_row("Active language", settings.active_language or "(all)")
    table.add_row("AI provider", settings.ai_provider)
    table.add_row("AI key", "***" if settings.has_ai_configured() else "Not set")
    table.add_row("Log Level", settings.log_level)
    console.print(table)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    rprint(f"[bold]lingua-cards[/bold] v{__version__}")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
