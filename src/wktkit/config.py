import configparser
import dataclasses
import os.path

from wktkit import constants


@dataclasses.dataclass
class Config:
    reader_format: str
    writer_format: str
    rounding_precision: int
    trim: bool
    output_dimension: int
    byte_order: int
    hex_case: str
    width: float
    height: float
    count: int
    quantize: float
    distance: float
    unique: bool
    retry_multiplier: int
    seed: str
    plot_format: str
    line_width: float
    pen: str
    log_file: str
    verbose: bool

    def show(self):
        print()
        print("Using configuration:")
        for k, v in self.__dict__.items():
            print(f"  + {k}: {v}")

    def seed_value(self):
        """
        Returns the sampler seed as an int, or None when no seed is configured.
        """
        if self.seed is None or str(self.seed).strip() == "":
            return None
        return int(self.seed)


def config_parser_factory(configuration_file):
    """
    Returns a ConfigParser by reading the specified file. With no file, the
    parser is empty and every value comes from the defaults.
    """
    cfg_parser = configparser.ConfigParser(
        interpolation=configparser.ExtendedInterpolation()
    )
    if configuration_file is None:
        return cfg_parser
    if not os.path.exists(configuration_file):
        raise ValueError(f"Unable to find configuration file {configuration_file}")
    cfg_parser.read(configuration_file)
    return cfg_parser


def _get_configuration_value(section, name, value_type, config_parser, overrides):
    """
    Returns a value from the provided config parser; any value for the key that
    is provided in the 'overrides' dictionary will take precedence.
    """
    if overrides.get(name) is not None:
        return overrides.get(name)

    if not config_parser.has_section(section):
        config_parser.add_section(section)

    if value_type is bool:
        return config_parser.getboolean(section, name)
    elif value_type is int:
        return config_parser.getint(section, name)
    elif value_type is float:
        return config_parser.getfloat(section, name)
    else:
        return config_parser.get(section, name)


def configuration(config_parser, overrides):
    """
    Returns a valid Config object that is populated from the provided config
    parser, with values overriden with anything provided in 'overrides'.
    """
    config_parser["DEFAULT"] = {
        "reader": constants.DEFAULT_READER_FORMAT,
        "writer": constants.DEFAULT_WRITER_FORMAT,
        "rounding_precision": constants.DEFAULT_ROUNDING_PRECISION,
        "trim": constants.DEFAULT_TRIM,
        "output_dimension": constants.DEFAULT_OUTPUT_DIMENSION,
        "byte_order": constants.DEFAULT_BYTE_ORDER,
        "hex_case": constants.DEFAULT_HEX_CASE,
        "width": constants.DEFAULT_WIDTH,
        "height": constants.DEFAULT_HEIGHT,
        "count": constants.DEFAULT_COUNT,
        "quantize": constants.DEFAULT_QUANTIZE,
        "distance": constants.DEFAULT_DISTANCE,
        "unique": constants.DEFAULT_UNIQUE,
        "retry_multiplier": constants.DEFAULT_RETRY_MULTIPLIER,
        "seed": constants.DEFAULT_SEED,
        "plot_format": constants.DEFAULT_PLOT_FORMAT,
        "line_width": constants.DEFAULT_LINE_WIDTH,
        "pen": constants.DEFAULT_PEN,
        "log_file": constants.DEFAULT_LOG_FILE,
        "verbose": constants.DEFAULT_VERBOSE,
    }
    # File keys are "reader"/"writer"; overrides use the Config field names.
    format_overrides = {
        "reader": overrides.get("reader_format"),
        "writer": overrides.get("writer_format"),
    }
    try:
        return Config(
            _get_configuration_value(constants.FORMATS_SECTION_NAME, "reader", str, config_parser, format_overrides),
            _get_configuration_value(constants.FORMATS_SECTION_NAME, "writer", str, config_parser, format_overrides),
            _get_configuration_value(constants.TEXT_SECTION_NAME, "rounding_precision", int, config_parser, overrides),
            _get_configuration_value(constants.TEXT_SECTION_NAME, "trim", bool, config_parser, overrides),
            _get_configuration_value(constants.BINARY_SECTION_NAME, "output_dimension", int, config_parser, overrides),
            _get_configuration_value(constants.BINARY_SECTION_NAME, "byte_order", int, config_parser, overrides),
            _get_configuration_value(constants.BINARY_SECTION_NAME, "hex_case", str, config_parser, overrides),
            _get_configuration_value(constants.SAMPLER_SECTION_NAME, "width", float, config_parser, overrides),
            _get_configuration_value(constants.SAMPLER_SECTION_NAME, "height", float, config_parser, overrides),
            _get_configuration_value(constants.SAMPLER_SECTION_NAME, "count", int, config_parser, overrides),
            _get_configuration_value(constants.SAMPLER_SECTION_NAME, "quantize", float, config_parser, overrides),
            _get_configuration_value(constants.SAMPLER_SECTION_NAME, "distance", float, config_parser, overrides),
            _get_configuration_value(constants.SAMPLER_SECTION_NAME, "unique", bool, config_parser, overrides),
            _get_configuration_value(constants.SAMPLER_SECTION_NAME, "retry_multiplier", int, config_parser, overrides),
            _get_configuration_value(constants.SAMPLER_SECTION_NAME, "seed", str, config_parser, overrides),
            _get_configuration_value(constants.PLOT_SECTION_NAME, "plot_format", str, config_parser, overrides),
            _get_configuration_value(constants.PLOT_SECTION_NAME, "line_width", float, config_parser, overrides),
            _get_configuration_value(constants.PLOT_SECTION_NAME, "pen", str, config_parser, overrides),
            _get_configuration_value(constants.LOGGING_SECTION_NAME, "log_file", str, config_parser, overrides),
            _get_configuration_value(constants.LOGGING_SECTION_NAME, "verbose", bool, config_parser, overrides),
        )
    except ValueError as e:
        raise ValueError(f"Unable to read the configuration: {e}") from e


def _valid_seed(seed):
    try:
        return seed is None or str(seed).strip() == "" or int(seed) >= 0
    except ValueError:
        return False


def validate(configuration):
    """
    Validates each value in the configuration.
    """
    validations = [
        ["reader_format", lambda f: f in constants.FORMAT_NAMES, "The reader format is not one of none, text, binary, hex."],
        ["writer_format", lambda f: f in constants.FORMAT_NAMES, "The writer format is not one of none, text, binary, hex."],
        ["hex_case", lambda c: c in constants.HEX_CASES, "The hex_case must be upper or lower."],
        ["byte_order", lambda b: b in constants.BYTE_ORDERS, "The byte_order must be -1, 0 or 1."],
        ["output_dimension", lambda d: d in (2, 3), "The output_dimension must be 2 or 3."],
        ["seed", _valid_seed, "The seed must be blank or an integer."],
        ["width", lambda w: w >= 0, "The width must not be negative."],
        ["height", lambda h: h >= 0, "The height must not be negative."],
        ["count", lambda n: n >= 0, "The count must not be negative."],
        ["quantize", lambda q: q >= 0, "The quantize interval must not be negative."],
        ["distance", lambda r: r >= 0, "The distance must not be negative."],
        ["retry_multiplier", lambda k: k > 0, "The retry_multiplier must be positive."],
        ["plot_format", lambda f: f in constants.PLOT_FORMATS, "The plot_format must be png, svg or pdf."],
    ]
    errors = [msg for name, fn, msg in validations if not fn(getattr(configuration, name))]
    return len(errors) == 0, errors
