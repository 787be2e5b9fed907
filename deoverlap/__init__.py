"""Remove lower ranked overlapping hits from Infernal and HMMER tabular output."""
from .clans import load_clan_file, parse_clan_lines
from .config import Options
from .driver import deoverlap_hits
from .errors import ClanFileError, ConfigError, DeoverlapError, FormatError, OrderingError
from .hits import Hit, normalize, read_hits
from .overlap import Outcome, get_overlap, resolve

__version__ = "0.7.0"

__all__ = [
    "ClanFileError",
    "ConfigError",
    "DeoverlapError",
    "FormatError",
    "Hit",
    "Options",
    "OrderingError",
    "Outcome",
    "deoverlap_hits",
    "get_overlap",
    "load_clan_file",
    "normalize",
    "parse_clan_lines",
    "read_hits",
    "resolve",
]
