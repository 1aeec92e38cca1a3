import configparser
import io
import logging
import os.path
import sys

import numpy as np
from funcy import decorator
from matplotlib.figure import Figure
from pyfiglet import Figlet
from rich.prompt import Confirm, Prompt

from wktkit import config
from wktkit import constants
from wktkit import iterate
from wktkit import sampler
from wktkit import sink
from wktkit.codecs import IOFormat
from wktkit.errors import EngineError
from wktkit.session import GeometrySession


CONSOLE_FORMAT = "%(message)s"
LOGFILE_FORMAT = "%(asctime)s|%(levelname)s|%(name)s|%(message)s"

def init_logging(configuration: config.Config):
    logger = logging.getLogger("wktkit")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    # Geometry output owns stdout, so the console log goes to stderr.
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if configuration.verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if configuration.log_file:
        logfile_handler = logging.FileHandler(configuration.log_file, "w")
        logfile_handler.setLevel(logging.DEBUG)
        logfile_handler.setFormatter(logging.Formatter(LOGFILE_FORMAT))
        logger.addHandler(logfile_handler)

@decorator
def log(call):
    logging.getLogger("wktkit").debug(f"Running {call._func.__name__}")
    return call()

def banner():
    """
    Displays the name of this utility using incredible ASCII-art.
    """
    f = Figlet(font='slant')
    return f.renderText('wktkit')

def init_config(configuration_file):
    """
    Prompts the user for configuration values and then creates a valid configuration file.
    """
    print("""This utility will create a wktkit configuration file by prompting """
          """you for values for each of the configuration parameters.""")
    print()
    if not configuration_file:
        configuration_file = Prompt.ask("configuration file name", default="wktkit.ini")
    else:
        print(f'Creating configuration file {configuration_file}')
        print()

    if (os.path.exists(configuration_file)):
        print(f'WARNING: The {configuration_file} already exists.')
        overwrite = Confirm.ask("Overwrite?")
        if not overwrite:
            print('Not overwriting existing file. Exiting.')
            sys.exit(1)

    cfg_parser = configparser.ConfigParser()

    print()
    print(f'{constants.FORMATS_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.FORMATS_SECTION_NAME)
    cfg_parser.set(constants.FORMATS_SECTION_NAME, "reader", Prompt.ask("Input format", choices=list(constants.FORMAT_NAMES), default=constants.DEFAULT_READER_FORMAT))
    cfg_parser.set(constants.FORMATS_SECTION_NAME, "writer", Prompt.ask("Output format", choices=list(constants.FORMAT_NAMES), default=constants.DEFAULT_WRITER_FORMAT))

    print()
    print(f'{constants.TEXT_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.TEXT_SECTION_NAME)
    cfg_parser.set(constants.TEXT_SECTION_NAME, "rounding_precision", Prompt.ask("WKT rounding precision (-1 for full precision)", default=str(constants.DEFAULT_ROUNDING_PRECISION)))
    cfg_parser.set(constants.TEXT_SECTION_NAME, "trim", Prompt.ask("Trim trailing zeros? (True/False)", default=str(constants.DEFAULT_TRIM)))

    print()
    print(f'{constants.BINARY_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.BINARY_SECTION_NAME)
    cfg_parser.set(constants.BINARY_SECTION_NAME, "output_dimension", Prompt.ask("Output dimension", default=str(constants.DEFAULT_OUTPUT_DIMENSION)))
    cfg_parser.set(constants.BINARY_SECTION_NAME, "byte_order", Prompt.ask("Byte order (-1 machine, 0 big endian, 1 little endian)", default=str(constants.DEFAULT_BYTE_ORDER)))
    cfg_parser.set(constants.BINARY_SECTION_NAME, "hex_case", Prompt.ask("Hex case", choices=list(constants.HEX_CASES), default=constants.DEFAULT_HEX_CASE))

    print()
    print(f'{constants.SAMPLER_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.SAMPLER_SECTION_NAME)
    cfg_parser.set(constants.SAMPLER_SECTION_NAME, "width", Prompt.ask("Width", default=str(constants.DEFAULT_WIDTH)))
    cfg_parser.set(constants.SAMPLER_SECTION_NAME, "height", Prompt.ask("Height", default=str(constants.DEFAULT_HEIGHT)))
    cfg_parser.set(constants.SAMPLER_SECTION_NAME, "count", Prompt.ask("Number of points", default=str(constants.DEFAULT_COUNT)))
    cfg_parser.set(constants.SAMPLER_SECTION_NAME, "quantize", Prompt.ask("Quantization interval (0 to disable)", default=str(constants.DEFAULT_QUANTIZE)))
    cfg_parser.set(constants.SAMPLER_SECTION_NAME, "distance", Prompt.ask("Minimum distance (0 to disable)", default=str(constants.DEFAULT_DISTANCE)))
    cfg_parser.set(constants.SAMPLER_SECTION_NAME, "unique", Prompt.ask("Unique points? (True/False)", default=str(constants.DEFAULT_UNIQUE)))
    cfg_parser.set(constants.SAMPLER_SECTION_NAME, "retry_multiplier", Prompt.ask("Retry multiplier", default=str(constants.DEFAULT_RETRY_MULTIPLIER)))
    cfg_parser.set(constants.SAMPLER_SECTION_NAME, "seed", Prompt.ask("Random seed (blank for none)", default=constants.DEFAULT_SEED))

    print()
    print(f'{constants.PLOT_SECTION_NAME} Parameters')
    print('--------------------------------------------------')
    cfg_parser.add_section(constants.PLOT_SECTION_NAME)
    cfg_parser.set(constants.PLOT_SECTION_NAME, "plot_format", Prompt.ask("Plot format", choices=list(constants.PLOT_FORMATS), default=constants.DEFAULT_PLOT_FORMAT))
    cfg_parser.set(constants.PLOT_SECTION_NAME, "line_width", Prompt.ask("Line width", default=str(constants.DEFAULT_LINE_WIDTH)))
    cfg_parser.set(constants.PLOT_SECTION_NAME, "pen", Prompt.ask("Pen colour", default=constants.DEFAULT_PEN))

    print()
    print(f'Saving new configuration: {configuration_file}')
    with open(configuration_file, "tw") as file:
        cfg_parser.write(file)

    return configuration_file

def _formats(configuration: config.Config) -> tuple[IOFormat, IOFormat]:
    return IOFormat.from_name(configuration.reader_format), IOFormat.from_name(configuration.writer_format)

# -------------------------------------------------------------------

@log
def hull(configuration: config.Config, input_path: str, output_path=None) -> int:
    """
    Writes the convex hull of the geometry in input_path to output_path.
    """
    reader_format, writer_format = _formats(configuration)
    with GeometrySession(reader_format, writer_format, configuration) as session:
        geom = session.load(input_path)
        result = session.context.convex_hull(geom)
        written = session.emit(output_path, result)
        session.context.destroy(result)
    return written

@log
def convert(configuration: config.Config, input_path: str, output_path=None) -> int:
    """
    Re-encodes the geometry in input_path with the configured writer format.
    """
    reader_format, writer_format = _formats(configuration)
    with GeometrySession(reader_format, writer_format, configuration) as session:
        session.load(input_path)
        return session.emit(output_path)

@log
def bounds(configuration: config.Config, input_path: str) -> tuple[float, float, float, float]:
    reader_format, _ = _formats(configuration)
    with GeometrySession(reader_format, IOFormat.NONE, configuration) as session:
        session.load(input_path)
        return session.bounds()

@log
def rand(configuration: config.Config, output_path=None) -> int:
    """
    Writes a collection of randomly sampled points to output_path and
    returns how many points it holds.
    """
    _, writer_format = _formats(configuration)
    sampler_config = sampler.SamplerConfig.from_configuration(configuration)
    rng = np.random.default_rng(configuration.seed_value())

    with GeometrySession(IOFormat.NONE, writer_format, configuration) as session:
        collection = sampler.sample(sampler_config, rng, session)
        count = session.context.num_geometries(collection)
        if count < sampler_config.count:
            logging.getLogger("wktkit").info(f"Only {count} of {sampler_config.count} points could be placed")
        session.emit(output_path, collection)
    return count

# -------------------------------------------------------------------

class PlotRenderer:
    """
    Feeds the members of a geometry tree to a matplotlib Axes.

    Points are drawn as markers; line strings, rings and polygon rings as
    paths. Multi-part geometries and nested collections are walked
    recursively.
    """

    def __init__(self, context, axes, line_width, pen):
        self.context = context
        self.axes = axes
        self.line_width = line_width
        self.pen = pen
        self._xs = []
        self._ys = []
        self._markers = False

    def visit(self, member, gtype):
        if gtype == "Point":
            return self._trace(member, markers=True)
        if gtype in ("LineString", "LinearRing"):
            return self._trace(member, markers=False)
        if gtype == "Polygon":
            self._markers = False
            return self._stop_on(iterate.iterate_rings(self.context, member, self._collect))
        if gtype.startswith("Multi") or gtype == "GeometryCollection":
            return self._stop_on(iterate.iterate(self.context, member, self.visit))
        return iterate.Stop(EngineError(f"Missing handler for {gtype}"))

    def _trace(self, member, markers):
        self._markers = markers
        return self._stop_on(iterate.iterate_coordinates(self.context, member, self._collect))

    def _stop_on(self, error):
        return iterate.Stop(error) if error else iterate.CONTINUE

    def _collect(self, index, total, x, y):
        if index == 0:
            self._xs, self._ys = [], []
        self._xs.append(x)
        self._ys.append(y)
        if index == total - 1:
            self._flush()
        return iterate.CONTINUE

    def _flush(self):
        if self._markers:
            self.axes.plot(self._xs, self._ys, linestyle="none", marker="o", color=self.pen, markersize=max(self.line_width * 3, 1))
        else:
            self.axes.plot(self._xs, self._ys, linewidth=self.line_width, color=self.pen)

def _padded(low, high):
    if low == high:
        return low - 0.5, high + 0.5
    return low, high

@log
def plot(configuration: config.Config, input_path: str, output_path=None) -> int:
    """
    Renders the geometry in input_path and writes the image to output_path.
    """
    reader_format, _ = _formats(configuration)
    with GeometrySession(reader_format, IOFormat.NONE, configuration) as session:
        session.load(input_path)
        xmin, xmax, ymin, ymax = session.bounds()

        figure = Figure()
        axes = figure.add_subplot()
        axes.set_xlim(*_padded(xmin, xmax))
        axes.set_ylim(*_padded(ymin, ymax))
        axes.set_aspect("equal", adjustable="datalim")

        renderer = PlotRenderer(session.context, axes, configuration.line_width, configuration.pen)
        error = iterate.iterate(session.context, session.geometry, renderer.visit)
        if error is not None:
            raise error

    image = io.BytesIO()
    figure.savefig(image, format=configuration.plot_format)
    return sink.write_output(output_path, image.getvalue())
