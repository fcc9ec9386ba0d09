"""
Rich console helpers for the mdsl CLI.

All user-facing output goes through here; modules log through
``logging`` instead. Warnings go to stderr so generated
artifacts on stdout stay clean.
"""

from rich import box
from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

console = Console()
err_console = Console(stderr=True)

# Style definitions
STYLES = {
    "success": Style(color="green", bold=True),
    "error": Style(color="red", bold=True),
    "warning": Style(color="yellow"),
    "info": Style(color="cyan"),
    "muted": Style(color="bright_black"),
}


def print_success(message: str) -> None:
    console.print(Text(f"✓ {message}", style=STYLES["success"]))


def print_error(message: str) -> None:
    console.print(Text(f"✗ {message}", style=STYLES["error"]))


def print_warning(message: str) -> None:
    err_console.print(Text(f"⚠ {message}", style=STYLES["warning"]))


def print_info(message: str) -> None:
    console.print(Text(f"ℹ {message}", style=STYLES["info"]))


def print_step(step_num: int, total: int, message: str) -> None:
    """Print a step indicator, e.g. ``[2/3] Generating cypher``."""
    console.print(
        Text(f"[{step_num}/{total}] ", style=STYLES["muted"]) + Text(message, style=STYLES["info"])
    )


def statement_table(rows: list[tuple[str, str, str]], title: str = "") -> Table:
    """
    Build a table of top-level statements.

    Args:
        rows: (kind, name, position) per statement
        title: Optional table title
    """
    table = Table(title=title or None, box=box.ROUNDED, show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Kind", style="white bold")
    table.add_column("Name", style="bright_cyan")
    table.add_column("Position", style="bright_black")

    for i, (kind, name, position) in enumerate(rows, 1):
        table.add_row(str(i), kind, name, position)
    return table
