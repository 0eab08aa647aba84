"""HTTP Top - Operator output"""

import json
from datetime import datetime

from rich.console import Console
from rich.markup import escape

from .models import WindowSummary
from .patterns import DISPLAY_TIME_FORMAT


def format_time(when: datetime) -> str:
    return when.strftime(DISPLAY_TIME_FORMAT).rstrip()


class Printer:
    """Writes summaries and alert transitions to stdout.

    With ``json_output`` every message becomes one JSON object per line.
    """

    def __init__(self, console: Console = None, json_output: bool = False):
        self.console = console or Console()
        self.json_output = json_output

    def _json(self, payload: dict):
        self.console.print_json(json.dumps(payload), indent=None)

    def welcome(self):
        if self.json_output:
            return
        self.console.print("Welcome to HTTP Top!\n", style="bold cyan")

    def summary(self, summary: WindowSummary):
        stamp = format_time(summary.time)

        if self.json_output:
            if summary.idle:
                self._json({'kind': 'idle', 'time': stamp})
            else:
                self._json({
                    'kind': 'summary',
                    'time': stamp,
                    'hits': summary.hits,
                    'kilobytes': summary.kilobytes,
                    'errors': summary.errors,
                    'section': summary.busiest,
                    'section_hits': summary.busiest_hits,
                })
            return

        if summary.idle:
            self.console.print(f"[dim]{escape(f'[{stamp}]')} No activity[/]")
            return

        error_style = 'red' if summary.errors else 'green'
        self.console.print(
            f"{escape(f'[{stamp}]')}: "
            f"Transferred: [cyan]{summary.kilobytes} KB[/] | "
            f"Errors: [{error_style}]{summary.errors}[/] | "
            f"Top Section: [bold]{escape(summary.busiest)}[/] ({summary.busiest_hits})"
        )

    def alert(self, hits: int, when: datetime):
        stamp = format_time(when)
        if self.json_output:
            self._json({'kind': 'alert', 'time': stamp, 'hits': hits})
            return
        self.console.print(
            f"[red bold]High traffic generated an alert - hits = {hits}, "
            f"triggered at {escape(stamp)}[/]"
        )

    def recovered(self, when: datetime):
        stamp = format_time(when)
        if self.json_output:
            self._json({'kind': 'recovered', 'time': stamp})
            return
        self.console.print(f"[green]High traffic subsided at {escape(stamp)}[/]")
