import typer

from phpsorter import __version__
from phpsorter.logging_config import logger, setup_logging
from phpsorter.cli import sort
from phpsorter.cli.config import CLIConfig
from phpsorter.cli.output import print_json
from phpsorter.user_config import get_user_config

app = typer.Typer()


# Global CLI callback for flags that apply to all commands
@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: pretty output with colors (also via PHPSORTER_HUMAN_MODE env var)"
    ),
):
    """
    phpsorter: sort PHP imports, trait uses, constants and properties

    Machine mode is DEFAULT (JSON output, no console logging).
    Use --human/-H for pretty output.
    """
    if human:
        CLIConfig.set_machine_mode(False)
        setup_logging(suppress_console=False)
    elif CLIConfig.is_machine_mode():
        # Machine mode - keep stdout pure JSON
        setup_logging(suppress_console=True)


app.command(name="sort")(sort.sort_cmd)


@app.command()
def config():
    """
    Prints the effective configuration (defaults, global and local files merged).
    """
    logger.debug("Printing effective configuration")
    print_json(get_user_config().get_all())


@app.command()
def version():
    """
    Prints the current version of phpsorter.
    """
    typer.echo(f"phpsorter v{__version__}")


if __name__ == "__main__":
    app()
