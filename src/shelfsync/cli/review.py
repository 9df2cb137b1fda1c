# ABOUTME: Interactive review of one book: field sources and category curation.
# ABOUTME: Renders Rich tables and drives a BookSession from click prompts.

import click
from rich.console import Console
from rich.table import Table

from shelfsync.categories.normalizer import ProcessedCategory
from shelfsync.core.assembler import PublishRecord
from shelfsync.core.session import BookSession
from shelfsync.metadata.candidate import CandidateValue, FieldName
from shelfsync.metadata.dates import format_display_date

_PREVIEW_LENGTH = 60


def _preview(candidate: CandidateValue | None, field_name: FieldName) -> str:
    if candidate is None:
        return "—"
    if field_name is FieldName.RELEASE_DATE:
        return format_display_date(str(candidate.content))
    text = str(candidate.content)
    if len(text) > _PREVIEW_LENGTH:
        return text[: _PREVIEW_LENGTH - 1] + "…"
    return text


def _status(category: ProcessedCategory) -> str:
    notes: list[str] = []
    if category.is_ignored:
        notes.append("[red]ignored[/red]")
    if category.is_mapped:
        notes.append(f"from {', '.join(category.mapped_to_this)}")
    elif category.mapped_to_this:
        notes.append(f"absorbs {', '.join(category.mapped_to_this)}")
    if category.is_geographical:
        notes.append("place")
    if category.is_temporal:
        notes.append("era")
    return "; ".join(notes)


def _parse_index(text: str, size: int) -> int | None:
    """Turn a 1-based choice into a 0-based index, or None when out of range."""
    try:
        index = int(text) - 1
    except ValueError:
        return None
    return index if 0 <= index < size else None


class ReviewSession:
    """Interactive review for one book session.

    Shows the reconciled fields, lets the user switch sources and curate
    categories, and returns the finalized record. Quiet mode accepts every
    default without prompting.
    """

    def __init__(self, *, console: Console | None = None, quiet: bool = False) -> None:
        self._console = console or Console()
        self._quiet = quiet

    def review(self, session: BookSession) -> PublishRecord | None:
        """Run the review loop.

        Returns:
            The finalized PublishRecord, or None if the user quits.
        """
        if self._quiet:
            return session.finalize()

        self._console.print(f"\n[bold]{session.book.title}[/bold]")
        if session.book.authors:
            self._console.print(f"  Author: {session.book.author}")

        while True:
            self.show_fields(session)
            self.show_categories(session)
            choice = click.prompt(
                "[f] Fields  [c] Categories  [d] Done  [q] Quit", type=str, default="d"
            ).lower()
            if choice == "d":
                return session.finalize()
            if choice == "q":
                return None
            if choice == "f":
                self._fields_prompt(session)
            elif choice == "c":
                self._categories_prompt(session)

    # --- Fields ---

    def _reviewable_fields(self, session: BookSession) -> list[FieldName]:
        candidates = session.candidates
        return [field_name for field_name in FieldName if candidates.get(field_name)]

    def show_fields(self, session: BookSession) -> None:
        table = Table(title="Fields")
        table.add_column("#", style="bold", width=3)
        table.add_column("Field")
        table.add_column("Value")
        table.add_column("Source", style="dim")
        table.add_column("Options", justify="right")

        resolutions = session.resolutions
        for i, field_name in enumerate(self._reviewable_fields(session), start=1):
            resolution = resolutions[field_name]
            table.add_row(
                str(i),
                field_name.value,
                _preview(resolution.selected, field_name),
                resolution.selected.label if resolution.selected else "—",
                str(len(resolution.candidates)),
            )
        self._console.print(table)

    def _fields_prompt(self, session: BookSession) -> None:
        fields = self._reviewable_fields(session)
        choice = click.prompt("Field number", type=str, default="")
        index = _parse_index(choice, len(fields))
        if index is None:
            return
        field_name = fields[index]
        resolution = session.resolution(field_name)

        table = Table(title=f"Sources for {field_name.value}")
        table.add_column("#", style="bold", width=3)
        table.add_column("Source")
        table.add_column("Value")
        for i, candidate in enumerate(resolution.candidates, start=1):
            marker = " *" if candidate.source == resolution.source else ""
            table.add_row(str(i), f"{candidate.label}{marker}", _preview(candidate, field_name))
        self._console.print(table)

        choice = click.prompt(
            "[1-N] Use  [r1-rN] Use and remember as default  [b] Back", type=str, default="b"
        ).lower()
        remember = choice.startswith("r")
        index = _parse_index(choice.removeprefix("r"), len(resolution.candidates))
        if index is None:
            return
        source = resolution.candidates[index].source
        session.select_source(field_name, source, remember=remember)
        if remember:
            self._console.print(f"Saved [cyan]{source}[/cyan] as default for {field_name.value}.")

    # --- Categories ---

    def show_categories(self, session: BookSession) -> None:
        result = session.categories
        if not result.categories:
            self._console.print("[yellow]No categories.[/yellow]")
            return

        table = Table(title="Categories")
        table.add_column("#", style="bold", width=3)
        table.add_column("Use", width=3)
        table.add_column("Category", style="cyan")
        table.add_column("Found via", style="dim")
        table.add_column("Notes")
        table.add_column("Similar")

        for i, category in enumerate(result.categories, start=1):
            selected = session.category_selection.is_selected(category.processed)
            table.add_row(
                str(i),
                "✓" if selected else "",
                category.processed,
                " + ".join(category.sources),
                _status(category),
                ", ".join(result.similar.get(category.processed, [])),
            )
        self._console.print(table)

    def _categories_prompt(self, session: BookSession) -> None:
        choice = click.prompt(
            "[1-N] Toggle  [a] All  [n] None  [i<N>] Ignore  [u<N>] Unignore  "
            "[m<N>] Merge  [x<N>] Unmap  [s<N>] Accept suggestion  [b] Back",
            type=str,
            default="b",
        ).lower()
        categories = session.categories.categories

        try:
            if choice == "a":
                session.select_all_categories()
                return
            if choice == "n":
                session.deselect_all_categories()
                return
            action, number = (choice[0], choice[1:]) if choice[:1].isalpha() else ("t", choice)
            index = _parse_index(number, len(categories))
            if index is None:
                return
            tag = categories[index].processed

            if action == "t":
                session.toggle_category(tag)
            elif action == "i":
                session.ignore_category(tag)
                self._console.print(f"Ignoring [cyan]{tag}[/cyan] from now on.")
            elif action == "u":
                session.unignore_category(tag)
            elif action == "m":
                target = click.prompt(f"Merge {tag} into", type=str)
                session.merge_category(tag, target)
                self._console.print(f"Mapped [cyan]{tag}[/cyan] to [cyan]{target}[/cyan].")
            elif action == "x":
                freed = session.unmap_category(tag)
                self._console.print(f"Removed mapping for {', '.join(freed)}.")
            elif action == "s":
                self._accept_suggestion(session, tag)
        except ValueError as exc:
            self._console.print(f"[red]{exc}[/red]")

    def _accept_suggestion(self, session: BookSession, tag: str) -> None:
        suggestions = session.categories.similar.get(tag, [])
        if not suggestions:
            self._console.print(f"[yellow]No suggestions for {tag}.[/yellow]")
            return
        target = suggestions[0]
        if len(suggestions) > 1:
            for i, suggestion in enumerate(suggestions, start=1):
                self._console.print(f"  {i}. {suggestion}")
            index = _parse_index(click.prompt("Merge into", type=str, default="1"), len(suggestions))
            if index is None:
                return
            target = suggestions[index]
        session.accept_suggestion(tag, target)
        self._console.print(f"Mapped [cyan]{tag}[/cyan] to [cyan]{target}[/cyan].")
