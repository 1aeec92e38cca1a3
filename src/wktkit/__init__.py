__version__ = "v1.0.0"


__all__ = [
    "__version__",
    "bounds",
    "cli",
    "codecs",
    "config",
    "constants",
    "engine",
    "errors",
    "ingest",
    "iterate",
    "sampler",
    "session",
    "sink",
    "tools",
]

from . import bounds
from . import cli
from . import codecs
from . import config
from . import constants
from . import engine
from . import errors
from . import ingest
from . import iterate
from . import sampler
from . import session
from . import sink
from . import tools
