import sys

import click

from wktkit import config
from wktkit import constants
from wktkit import tools
from wktkit.errors import WktError


def _configuration(config_filename, overrides):
    """
    Builds, validates and applies the configuration for one command.
    """
    try:
        configuration = config.configuration(config.config_parser_factory(config_filename), overrides)
    except ValueError as e:
        raise click.UsageError(str(e))

    valid, errors = config.validate(configuration)
    if not valid:
        raise click.UsageError("The configuration is invalid:\n" + "\n".join(" * " + msg for msg in errors))

    tools.init_logging(configuration)
    return configuration

def _wkb_format(binary, hex):
    if hex:
        return "hex"
    if binary:
        return "binary"
    return None

def _run(operation, *args):
    try:
        return operation(*args)
    except WktError as e:
        click.echo(f"\nUnable to process geometry: {e}", err=True)
        sys.exit(1)

config_option = click.option('-c', '--config', 'config_filename', help='Path to configuration file', required=False)
verbose_option = click.option('-v', '--verbose', is_flag=True, help='Verbose messages')
binary_option = click.option('-b', '--binary', is_flag=True, help='WKB IO')
hex_option = click.option('-B', '--hex', is_flag=True, help='WKB HEX IO')


@click.group(epilog="For detailed help on each command, run: wktkit COMMAND --help")
def cli():
    """The wktkit utility reads, transforms and writes geometries encoded as
    WKT, WKB or hex WKB."""
    pass

@cli.command()
@click.option('-c', '--config', help='Path to configuration file to create or replace')
def init(config):
    """Populates a configuration file based on user input."""
    click.echo(tools.banner())
    config = tools.init_config(config)
    click.echo(f'Initialized the wktkit configuration file {config}')

@cli.command()
@config_option
def info(config_filename):
    """Summarizes the effective configuration."""
    click.echo(tools.banner())
    configuration = _configuration(config_filename, {})
    configuration.show()

@cli.command()
@config_option
@verbose_option
@binary_option
@hex_option
@click.argument('input')
@click.argument('output', required=False)
def hull(config_filename, verbose, binary, hex, input, output):
    """Writes the convex hull of the INPUT geometry to OUTPUT (default stdout)."""
    fmt = _wkb_format(binary, hex)
    overrides = {'reader_format': fmt, 'writer_format': fmt, 'verbose': verbose or None}
    configuration = _configuration(config_filename, overrides)
    _run(tools.hull, configuration, input, output)

@cli.command()
@config_option
@verbose_option
@click.option('--from', 'from_format', type=click.Choice(constants.FORMAT_NAMES[1:]), help='Input format')
@click.option('--to', 'to_format', type=click.Choice(constants.FORMAT_NAMES[1:]), help='Output format')
@click.argument('input')
@click.argument('output', required=False)
def convert(config_filename, verbose, from_format, to_format, input, output):
    """Re-encodes the INPUT geometry into OUTPUT (default stdout)."""
    overrides = {'reader_format': from_format, 'writer_format': to_format, 'verbose': verbose or None}
    configuration = _configuration(config_filename, overrides)
    _run(tools.convert, configuration, input, output)

@cli.command()
@config_option
@verbose_option
@binary_option
@hex_option
@click.argument('input')
def bounds(config_filename, verbose, binary, hex, input):
    """Prints the bounds of the INPUT geometry as: xmin xmax ymin ymax."""
    overrides = {'reader_format': _wkb_format(binary, hex), 'verbose': verbose or None}
    configuration = _configuration(config_filename, overrides)
    xmin, xmax, ymin, ymax = _run(tools.bounds, configuration, input)
    click.echo(f'{xmin} {xmax} {ymin} {ymax}')

@cli.command()
@config_option
@verbose_option
@binary_option
@hex_option
@click.option('-x', '--width', type=float, help='Output width')
@click.option('-y', '--height', type=float, help='Output height')
@click.option('-n', '--number', 'count', type=int, help='Number of points')
@click.option('-s', '--seed', help='Random seed')
@click.option('-q', '--quantize', type=float, help='Snap coordinates to multiples of this interval')
@click.option('-d', '--distance', type=float, help='Minimum distance between points')
@click.option('-u', '--unique', is_flag=True, help='Reject duplicate points')
@click.option('-k', '--retry-multiplier', type=int, help='Attempts allowed per requested point')
@click.argument('output', required=False)
def rand(config_filename, verbose, binary, hex, width, height, count, seed, quantize, distance, unique, retry_multiplier, output):
    """Writes a collection of random points to OUTPUT (default stdout)."""
    overrides = {
        'reader_format': 'none',
        'writer_format': _wkb_format(binary, hex),
        'verbose': verbose or None,
        'width': width,
        'height': height,
        'count': count,
        'seed': seed,
        'quantize': quantize,
        'distance': distance,
        'unique': unique or None,
        'retry_multiplier': retry_multiplier,
    }
    configuration = _configuration(config_filename, overrides)
    _run(tools.rand, configuration, output)

@cli.command()
@config_option
@verbose_option
@binary_option
@hex_option
@click.option('-T', '--format', 'plot_format', type=click.Choice(constants.PLOT_FORMATS), help='Output format')
@click.option('-w', '--width', 'line_width', type=float, help='Line width')
@click.option('--pen', help='Pen colour')
@click.argument('input')
@click.argument('output', required=False)
def plot(config_filename, verbose, binary, hex, plot_format, line_width, pen, input, output):
    """Renders the INPUT geometry as an image written to OUTPUT (default stdout)."""
    overrides = {
        'reader_format': _wkb_format(binary, hex),
        'verbose': verbose or None,
        'plot_format': plot_format,
        'line_width': line_width,
        'pen': pen,
    }
    configuration = _configuration(config_filename, overrides)
    _run(tools.plot, configuration, input, output)

if __name__ == "__main__":
    cli()
