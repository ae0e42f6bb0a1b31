"""Pure rendering functions: ViewState in, rich renderables out.

Nothing here touches the session or the terminal, so every view can be
rendered to text in tests with a plain rich Console.
"""

from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from browse.scroll import ScrollSync
from browse.session import ViewState
from common.constants import COMMIT_ENTRY_HEIGHT, NO_PARENT, TIMESTAMP_FORMAT
from repository.models import CommitGraph, CommitRecord, Signature

KEY_HINTS = (
    ("↑/k/+", "up"),
    ("↓/j/-", "down"),
    ("r", "refresh"),
    ("c", "copy hash"),
    ("tab", "focus"),
    ("q", "quit"),
)


def format_timestamp(value) -> str:
    return value.strftime(TIMESTAMP_FORMAT) if value is not None else "-"


def head_labels(graph: CommitGraph, commit: CommitRecord) -> list[str]:
    """Names of the branches whose head is *commit*, sorted."""
    if not graph.is_most_recent_commit_on_branch(commit.hash):
        return []
    labels = []
    for name in sorted(commit.branches):
        head = graph.most_recent_commit_of_branch(name)
        if head is not None and head.hash == commit.hash:
            labels.append(name)
    return labels


def log_entry_lines(
    commit: CommitRecord,
    colors: dict[str, str],
    selected: bool,
    heads: list[str] | None = None,
) -> list[Text]:
    """The fixed-height block of one commit in the log pane."""
    header = Text()
    for branch in sorted(commit.branches):
        header.append("● ", style=colors.get(branch, "white"))
    header.append(commit.short_hash, style="bold yellow")
    if heads:
        header.append(" (")
        for i, name in enumerate(heads):
            if i:
                header.append(", ")
            header.append(name, style=f"bold {colors.get(name, 'white')}")
        header.append(")")
    header.append(f"  {format_timestamp(commit.timestamp)}", style="dim")
    if commit.is_signed:
        header.append("  ✓" if all(s.valid for s in commit.signatures) else "  ✗")

    subject = Text(f"  {commit.title.splitlines()[0] if commit.title else ''}")
    lines = [header, subject]
    lines.extend(Text("") for _ in range(COMMIT_ENTRY_HEIGHT - len(lines)))

    if selected:
        for line in lines[:2]:
            line.stylize("reverse")
    return lines[:COMMIT_ENTRY_HEIGHT]


def render_log(
    state: ViewState,
    viewport_height: int,
    scroll: ScrollSync | None = None,
) -> Text:
    """Render the window of the commit log that the scroll offset exposes."""
    scroll = scroll or ScrollSync()
    if not state.sequence:
        return Text("no commits on the visible branches", style="dim italic")

    offset = scroll.offset_for(state.selection_index, len(state.sequence), viewport_height)
    first = offset // scroll.entry_height
    last = min(len(state.sequence), first + viewport_height // scroll.entry_height + 2)

    lines: list[Text] = []
    for position in range(first, last):
        commit = state.graph[state.sequence[position]]
        lines.extend(
            log_entry_lines(
                commit,
                state.branch_colors,
                position == state.selection_index,
                head_labels(state.graph, commit),
            )
        )

    skip = offset - first * scroll.entry_height
    window = lines[skip : skip + max(viewport_height, 0)]
    return Text("\n").join(window)


def _signature_table(signatures: tuple[Signature, ...]) -> Table:
    table = Table.grid(padding=(0, 1))
    table.add_column(style="bold")
    table.add_column()
    for signature in signatures:
        status = Text("valid", style="green") if signature.valid else Text("invalid", style="red")
        flags = [
            label
            for label, flag in (
                ("signature expired", signature.sig_expired),
                ("key expired", signature.key_expired),
                ("key revoked", signature.key_revoked),
                ("key missing", signature.key_missing),
            )
            if flag
        ]
        if flags:
            status.append(f" ({', '.join(flags)})", style="dim")
        table.add_row("signature", status)
        table.add_row("  key", f"{signature.pubkey_algorithm} {signature.fingerprint}".strip())
        if signature.fingerprint_primary and signature.fingerprint_primary != signature.fingerprint:
            table.add_row("  primary", signature.fingerprint_primary)
        if signature.username or signature.usermail:
            table.add_row("  signer", f"{signature.username} <{signature.usermail}>")
        table.add_row("  made", format_timestamp(signature.timestamp))
        if signature.expire_timestamp is not None:
            table.add_row("  expires", format_timestamp(signature.expire_timestamp))
    return table


def _branch_positions(graph: CommitGraph, commit: CommitRecord) -> str:
    positions = []
    for name in sorted(commit.branches):
        newer = [c.hash for c in graph.commits_of_branch(name)].index(commit.hash)
        positions.append(f"{name} (head)" if newer == 0 else f"{name} ({newer} newer)")
    return ", ".join(positions)


def render_info(commit: CommitRecord | None, graph: CommitGraph | None = None) -> RenderableType:
    """Detail view of the selected commit.

    With *graph*, each branch also shows how many newer commits it has.
    """
    if commit is None:
        return Text("no commit selected", style="dim italic")

    table = Table.grid(padding=(0, 1))
    table.add_column(style="bold")
    table.add_column()
    table.add_row("hash", commit.hash)
    table.add_row("subject", commit.title)
    table.add_row("date", format_timestamp(commit.timestamp))
    if commit.version:
        table.add_row("version", commit.version)
    table.add_row("parent", commit.parent_hash or NO_PARENT)
    table.add_row("checksum", commit.content_checksum)
    if graph is not None and commit.hash in graph:
        table.add_row("branches", _branch_positions(graph, commit))
    else:
        table.add_row("branches", ", ".join(sorted(commit.branches)))

    parts: list[RenderableType] = [table]
    if commit.body:
        parts.append(Text(""))
        parts.append(Text(commit.body))
    if commit.signatures:
        parts.append(Text(""))
        parts.append(_signature_table(commit.signatures))
    return Group(*parts)


def render_status(state: ViewState) -> Text:
    """Footer: key hints, position and the latest refresh warnings."""
    text = Text()
    for key, label in KEY_HINTS:
        text.append(f" {key}", style="bold")
        text.append(f" {label} ")
    if state.selection_index is not None:
        text.append(f"  {state.selection_index + 1}/{len(state.sequence)}", style="dim")
    if state.warnings:
        text.append(f"  ⚠ {state.warnings[-1]}", style="yellow")
        if len(state.warnings) > 1:
            text.append(f" (+{len(state.warnings) - 1} more)", style="yellow")
    return text


def render_title(state: ViewState) -> Text:
    return Text.assemble(
        ("OSTree TUI", "bold"),
        " on ",
        (state.repo_path, "italic"),
        f"  {len(state.visible_branches)}/{len(state.branches)} branches",
    )
