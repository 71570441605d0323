# ScriptSync Console Output
# Rich-based console output for push, pull and status results

from collections.abc import Sequence
from typing import Any, Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.tree import Tree

from scriptsync.errors import PushSyntaxError, ScriptSyncError
from scriptsync.sync.files import PullPlan, PushFile, PushPlan, RemoteFile


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, stderr: bool = False):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
            stderr: Write to stderr instead of stdout.
        """
        self.verbose = verbose
        self._console = RichConsole(no_color=not colored, stderr=stderr, highlight=False)

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_json(self, data: Any) -> None:
        """Print data as JSON."""
        self._console.print_json(data=data)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{escape(message)}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{escape(message)}[/blue]")

    def print_exception(self, error: ScriptSyncError) -> None:
        """Print a ScriptSync error, with a code snippet for syntax errors."""
        self.print_error(error.message)
        if isinstance(error, PushSyntaxError) and error.snippet:
            self._console.print(Panel(escape(error.snippet), title=escape(error.file_name), border_style="red"))

    def print_push_result(
        self,
        plan: PushPlan,
        pushed: Sequence[PushFile],
        *,
        removed: Sequence[RemoteFile] = (),
    ) -> None:
        """
        Print the outcome of a push.

        Args:
            plan: The executed push plan.
            pushed: Files that were uploaded.
            removed: Remote files dropped by the push.
        """
        for file in pushed:
            self._console.print(f"[green]└─[/green] {file.local_path}")
        for remote in removed:
            self._console.print(f"[red]×[/red] [dim]{remote.name} (removed from remote)[/dim]")

        if self.verbose and plan.excluded:
            self._console.print("\n[dim]Not pushed:[/dim]")
            for path in plan.excluded:
                self._console.print(f"  [dim]○ {path}[/dim]")

        self._console.print(f"\n[green]Pushed {len(pushed)} file(s).[/green]")

    def print_pull_result(self, written: Sequence[str], plan: PullPlan) -> None:
        """Print written files and files skipped for empty source."""
        for path in written:
            self._console.print(f"[cyan]└─[/cyan] {path}")
        for path in plan.skipped_empty:
            self._console.print(f"[dim]○ {path} (empty, skipped)[/dim]")
        self._console.print(f"\n[green]Pulled {len(written)} file(s).[/green]")

    def print_status(self, tracked: Sequence[str], untracked: Sequence[str]) -> None:
        """
        Print which local files a push would include.

        Args:
            tracked: Files that would be pushed, in push order.
            untracked: Ignored or unsupported paths, collapsed by directory.
        """
        tree = Tree(f"[bold]Tracked files[/bold] ({len(tracked)})", guide_style="green")
        for path in tracked:
            tree.add(f"[green]{path}[/green]")
        self._console.print(tree)

        if untracked:
            tree = Tree(f"[bold]Untracked files[/bold] ({len(untracked)})", guide_style="dim")
            for path in untracked:
                tree.add(f"[dim]{path}[/dim]")
            self._console.print(tree)

    def print_missing_push_order(self, missing: Sequence[str]) -> None:
        """Warn about push order entries that matched no pushed file."""
        for entry in missing:
            self.print_warning(f"File in filePushOrder was not pushed: {entry}")

    def print_settings(self, settings: dict[str, Any], source: Optional[str] = None) -> None:
        """Print project settings as a table."""
        table = Table(show_header=True, header_style="bold", title=source)
        table.add_column("Key", style="cyan")
        table.add_column("Value")

        for key, value in settings.items():
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value)
            table.add_row(key, str(value))

        self._console.print(table)

    def print_config(self, config_path: str, content: str) -> None:
        """Print an effective YAML configuration."""
        self._console.print(
            Panel(
                Syntax(content, "yaml", background_color="default"),
                title=f"ScriptSync Configuration ({config_path})",
                border_style="blue",
            )
        )


def create_console(*, verbose: bool = False, colored: bool = True) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored)
