"""SOC Lens CLI layer."""

__all__ = ["cli"]


def cli() -> None:
    """Lazy import and run the CLI."""
    from soclens.cli.main import main

    main()
