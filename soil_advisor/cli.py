"""Command-line interface for soil-advisor."""

import click

from soil_advisor import __version__
from soil_advisor.cli_soil import soil


@click.group()
@click.version_option(version=__version__, prog_name="soil-advisor")
def main() -> None:
    """Soil Advisor: classify soil at a location and recommend crops."""


main.add_command(soil, name="soil")


if __name__ == "__main__":
    main()
