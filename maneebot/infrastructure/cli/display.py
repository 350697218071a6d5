"""Console implementation of the InteractionResponder using Rich.

Lets `maneebot ask` run the exact /manee flow from a terminal.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from maneebot.domain.interfaces.responder import InteractionResponder

class ConsoleDisplay(InteractionResponder):
    """Prints replies to the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def display_output(self, content: str) -> None:
        self.console.print(Panel(Text(content), title="Manee", title_align="left", border_style="cyan"))

    def display_info(self, message: str) -> None:
        self.console.print(f"[blue]Info:[/blue] {message}")

    def display_error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    async def reply(self, content: str) -> None:
        self.display_output(content)

    async def defer(self) -> None:
        self.display_info("Manee is thinking...")

    async def edit_reply(self, content: str) -> None:
        self.display_output(content)
