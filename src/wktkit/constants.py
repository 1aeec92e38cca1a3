# Default configuration values
DEFAULT_READER_FORMAT = "text"
DEFAULT_WRITER_FORMAT = "text"
DEFAULT_ROUNDING_PRECISION = -1
DEFAULT_TRIM = True
DEFAULT_OUTPUT_DIMENSION = 3
DEFAULT_BYTE_ORDER = -1
DEFAULT_HEX_CASE = "upper"
DEFAULT_WIDTH = 1.0
DEFAULT_HEIGHT = 1.0
DEFAULT_COUNT = 0
DEFAULT_QUANTIZE = 0.0
DEFAULT_DISTANCE = 0.0
DEFAULT_UNIQUE = False
DEFAULT_RETRY_MULTIPLIER = 10
DEFAULT_SEED = ""
DEFAULT_PLOT_FORMAT = "png"
DEFAULT_LINE_WIDTH = 1.0
DEFAULT_PEN = "black"
DEFAULT_LOG_FILE = ""
DEFAULT_VERBOSE = False

# Configuration sections
FORMATS_SECTION_NAME = "Formats"
TEXT_SECTION_NAME = "Text"
BINARY_SECTION_NAME = "Binary"
SAMPLER_SECTION_NAME = "Sampler"
PLOT_SECTION_NAME = "Plot"
LOGGING_SECTION_NAME = "Logging"

# Format names accepted in configuration files and on the command line
FORMAT_NAMES = ("none", "text", "binary", "hex")
HEX_CASES = ("upper", "lower")
BYTE_ORDERS = (-1, 0, 1)
PLOT_FORMATS = ("png", "svg", "pdf")

# Output sink
STDOUT_SENTINEL = "-"
STDOUT_NAME = "<stdout>"
STDOUT_FILENO = 1
OUTPUT_FILE_MODE = 0o666

# Geometry type tags that own a coordinate sequence
SEQUENCE_TYPES = ("Point", "LineString", "LinearRing")
