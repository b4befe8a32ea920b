"""Main CLI interface for Claude Graph."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from claude_graph.core.commit_source import (
    DEFAULT_LIMIT,
    attach_contexts,
    commit_detail,
    load_commits,
    load_context_map,
    open_repo,
)
from claude_graph.core.config import find_config, load_config
from claude_graph.core.layout import GraphLayoutEngine
from claude_graph.core.transcripts import find_conversation
from claude_graph.exceptions import ClaudeGraphError
from claude_graph.models.commit import Commit
from claude_graph.models.layout import ConnectionKind, GraphLayout, context_node_id

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {error}[/red]")
    raise click.Abort() from error


def _load_inputs(
    repo_path: str,
    contexts: Optional[str],
    config_path: Optional[str],
    limit: int,
    rev: str,
    all_branches: bool,
):
    """Read commits, contexts and config, aborting on any source error."""
    try:
        commits = load_commits(
            Path(repo_path), limit=limit, rev=rev, all_branches=all_branches
        )
        if contexts:
            commits = attach_contexts(commits, load_context_map(Path(contexts)))

        if config_path:
            config = load_config(Path(config_path))
        else:
            root = Path(open_repo(Path(repo_path)).working_dir)
            config = load_config(find_config(root))
    except ClaudeGraphError as e:
        _fail(e)
    return commits, config


def _commit_options(func):
    func = click.option(
        "--config",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        help="Layout config JSON (defaults to .claude-graph.json in the repo)",
    )(func)
    func = click.option(
        "--all", "all_branches", is_flag=True, help="Include commits of all branches"
    )(func)
    func = click.option("--rev", default="HEAD", help="Revision to walk from")(func)
    func = click.option(
        "--limit", default=DEFAULT_LIMIT, help="Number of commits to read"
    )(func)
    func = click.option(
        "--contexts",
        type=click.Path(exists=True, dir_okay=False),
        help="JSON file of conversation contexts keyed by commit SHA",
    )(func)
    func = click.argument("repo_path", type=click.Path(exists=True), default=".")(func)
    return func


@click.group()
@click.version_option(package_name="claude-graph")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """Claude Graph - Git history and Claude sessions as one graph."""
    _setup_logging(verbose)


@main.command()
@_commit_options
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the layout JSON to a file instead of stdout",
)
def layout(
    repo_path: str,
    contexts: Optional[str],
    limit: int,
    rev: str,
    all_branches: bool,
    config_path: Optional[str],
    output: Optional[str],
):
    """Compute the graph layout and print it as JSON."""
    commits, config = _load_inputs(
        repo_path, contexts, config_path, limit, rev, all_branches
    )
    graph = GraphLayoutEngine(config).compute_layout(commits)
    payload = json.dumps(graph.to_dict(), indent=2)

    if output:
        Path(output).write_text(payload + "\n", encoding="utf-8")
        console.print(
            f"[green]✅ Wrote layout of {len(graph.commit_nodes)} commits to {output}[/green]"
        )
    else:
        click.echo(payload)


def _session_role(sha: str, graph: GraphLayout) -> str:
    """Describe how a commit's context joins its session."""
    node_id = context_node_id(sha)
    roles = []
    for connection in graph.connections:
        if connection.target == node_id and connection.kind in (
            ConnectionKind.BRANCH_OUT,
            ConnectionKind.CONTINUATION,
        ):
            starts = connection.kind == ConnectionKind.BRANCH_OUT
            roles.append("starts" if starts else "continues")
        elif (
            connection.source == node_id
            and connection.kind == ConnectionKind.MERGE_BACK
        ):
            roles.append("ends")
    return ", ".join(roles)


def _log_table(commits: List[Commit], graph: GraphLayout) -> Table:
    by_sha = {c.sha: c for c in commits}
    table = Table(title="Commit graph")
    table.add_column("Commit", style="cyan")
    table.add_column("Lane", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Branch", style="green")
    table.add_column("Message")
    table.add_column("Context", style="yellow")
    table.add_column("Session")

    for node in graph.commit_nodes:
        commit = by_sha[node.sha]
        ctx = commit.conversation_context
        table.add_row(
            commit.short_sha,
            str(node.lane),
            str(node.depth),
            ", ".join(commit.branches),
            commit.subject[:50],
            f"{ctx.context_id} ({ctx.total_messages} msgs)" if ctx else "",
            _session_role(commit.sha, graph) if ctx else "",
        )
    return table


@main.command()
@_commit_options
def log(
    repo_path: str,
    contexts: Optional[str],
    limit: int,
    rev: str,
    all_branches: bool,
    config_path: Optional[str],
):
    """Show commits with their lanes, depths and sessions."""
    commits, config = _load_inputs(
        repo_path, contexts, config_path, limit, rev, all_branches
    )
    if not commits:
        console.print("[yellow]No commits found[/yellow]")
        return

    graph = GraphLayoutEngine(config).compute_layout(commits)
    console.print(_log_table(commits, graph))

    bounds = graph.bounds
    console.print(
        f"[bold]Lanes:[/bold] {max(n.lane for n in graph.commit_nodes) + 1}  "
        f"[bold]Contexts:[/bold] {len(graph.context_nodes)}  "
        f"[bold]Connections:[/bold] {len(graph.connections)}  "
        f"[bold]Viewport:[/bold] {bounds.width:g}x{bounds.height:g}"
    )


@main.command()
@click.argument("contexts_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("context_id")
@click.option("--limit", default=0, help="Show only the last N messages")
def transcript(contexts_file: str, context_id: str, limit: int):
    """Show the chat transcript of a conversation context."""
    try:
        records = load_context_map(Path(contexts_file))
        conversation = find_conversation(records, context_id)
    except ClaudeGraphError as e:
        _fail(e)

    if conversation is None:
        console.print(f"[red]No transcript found for context {context_id}[/red]")
        raise click.Abort()

    messages = conversation.messages[-limit:] if limit > 0 else conversation.messages
    console.print(
        f"[bold]Context:[/bold] {context_id} "
        f"({conversation.total_messages} messages)"
    )
    colors = {"user": "cyan", "assistant": "yellow", "system": "dim"}
    for message in messages:
        color = colors.get(message.type.value, "white")
        stamp = message.timestamp.isoformat() if message.timestamp else ""
        console.print(f"\n[{color}][bold]{message.type.value}[/bold] {stamp}[/{color}]")
        console.print(message.content, markup=False, highlight=False)


@main.command()
@click.argument("sha")
@click.argument("repo_path", type=click.Path(exists=True), default=".")
@click.option("--patch", "-p", is_flag=True, help="Show the diff against the parent")
def show(sha: str, repo_path: str, patch: bool):
    """Show one commit with its changed files."""
    try:
        detail = commit_detail(Path(repo_path), sha, patch=patch)
    except ClaudeGraphError as e:
        _fail(e)

    console.print(f"[bold cyan]commit {detail.sha}[/bold cyan]")
    console.print(f"[bold]Author:[/bold] {detail.author_name} <{detail.author_email}>")
    console.print(f"[bold]Date:[/bold]   {detail.authored_at.isoformat()}")
    if detail.parent_shas:
        parents = " ".join(p[:7] for p in detail.parent_shas)
        console.print(f"[bold]Parents:[/bold] {parents}")
    console.print(f"\n    {detail.subject}", markup=False, highlight=False)
    if detail.body:
        for line in detail.body.splitlines():
            console.print(f"    {line}", markup=False, highlight=False)

    table = Table(title=f"{detail.files_changed} files changed")
    table.add_column("File", style="cyan")
    table.add_column("Status")
    table.add_column("+", justify="right", style="green")
    table.add_column("-", justify="right", style="red")
    for change in detail.files:
        table.add_row(
            change.path, change.status, str(change.additions), str(change.deletions)
        )
    console.print(table)
    console.print(
        f"[green]+{detail.insertions}[/green] [red]-{detail.deletions}[/red]"
    )

    if detail.patch:
        console.print(Syntax(detail.patch, "diff", theme="monokai", word_wrap=True))


if __name__ == "__main__":
    main()
