"""Console presenter for interactive authentication challenges"""

from rich.console import Console
from rich.panel import Panel


class ConsoleChallengePresenter:
    """Prints the challenge URL so it can be approved from the mobile app"""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def __call__(self, challenge_url: str) -> None:
        self.console.print(
            Panel(
                f"[bold]{challenge_url}[/bold]\n\n"
                "Use the Steam Mobile App to sign in via QR code.",
                title="Challenge URL",
                border_style="cyan",
            )
        )
