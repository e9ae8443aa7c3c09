"""Rich-backed implementation of the interactive prompt capability."""

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from watchmatch.core.prompts import Prompter


class RichPrompter(Prompter):
    """Numbered-menu prompter on a Rich console.

    An empty answer, Ctrl-C or end of input yields ``None`` so the resolvers
    treat it as cancel.
    """

    def __init__(self, console: Console) -> None:
        self.console = console

    def choose(self, question: str, options: list[str]) -> str | None:
        self.console.print(f"\n[bold]{question}[/bold]")
        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Option", style="cyan", justify="right")
        table.add_column("Choice")
        for i, option in enumerate(options, 1):
            table.add_row(str(i), option)
        self.console.print(table)

        try:
            answer = Prompt.ask(
                f"Enter your choice (1-{len(options)})",
                console=self.console,
                choices=[str(i) for i in range(1, len(options) + 1)],
                default="",
                show_choices=False,
                show_default=False,
            )
        except (KeyboardInterrupt, EOFError):
            return None
        if not answer:
            return None
        return options[int(answer) - 1]

    def confirm(self, question: str) -> bool:
        try:
            return Confirm.ask(question, console=self.console, default=False)
        except (KeyboardInterrupt, EOFError):
            return False
