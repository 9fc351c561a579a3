"""State shared by every soclens command."""

from dataclasses import dataclass

from soclens.cli.output import OutputFormatter
from soclens.core.config import Settings


@dataclass
class AppContext:
    """Resolved global options and settings for one invocation.

    Stored as ``ctx.obj`` by the command group.
    """

    formatter: OutputFormatter
    settings: Settings
    verbose: bool = False
    quiet: bool = False
