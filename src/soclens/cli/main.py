"""SOC Lens CLI entry point and global options."""

from pathlib import Path
from typing import Literal

import click

from soclens import __version__
from soclens.cli.context import AppContext
from soclens.cli.logs import frameworks, mitre, normalize, stats
from soclens.cli.output import OutputFormat, OutputFormatter, set_output_format
from soclens.cli.watch import watch
from soclens.core.config import load_config
from soclens.core.errors import ConfigError, handle_error
from soclens.core.logging import configure_logging, debug, set_verbose

EXIT_SUCCESS = 0
EXIT_ERROR = 1


@click.group()
@click.option(
    "--format",
    "-f",
    type=click.Choice(["json", "jsonl", "human"]),
    default="json",
    help="Result format on stdout (default: json)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug details to stderr")
@click.option("--quiet", "-q", is_flag=True, help="Only log warnings and errors")
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Log line format on stderr (default: text)",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="YAML settings file (default: ./soclens.yaml if present)",
)
@click.version_option(version=__version__, prog_name="soclens")
@click.pass_context
def cli(
    ctx: click.Context,
    format: OutputFormat,
    verbose: bool,
    quiet: bool,
    log_format: Literal["text", "json"],
    config_path: Path | None,
) -> None:
    """SOC Lens: normalize security logs and compute compliance statistics.

    Reads raw log-store documents (JSON array, wrapped JSON or JSONL) and
    reports HIPAA, PCI-DSS, GDPR, NIST 800-53 and TSC statistics.
    """
    set_output_format(format)
    set_verbose(verbose)
    configure_logging(log_format=log_format, quiet=quiet)
    formatter = OutputFormatter(format=format)

    try:
        settings = load_config(config_path)
    except ConfigError as e:
        formatter.error(e.to_structured_error())
        ctx.exit(EXIT_ERROR)

    debug("Settings loaded", **settings.model_dump())
    ctx.obj = AppContext(formatter=formatter, settings=settings, verbose=verbose, quiet=quiet)


for command in (normalize, stats, mitre, frameworks, watch):
    cli.add_command(command)


def main() -> None:
    """Console entry point; unexpected exceptions become structured errors."""
    try:
        cli()
    except Exception as e:
        handle_error(e, exit_code=EXIT_ERROR)


if __name__ == "__main__":
    main()
