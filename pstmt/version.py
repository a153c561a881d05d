# Standard
from importlib import metadata

try:
    __version__ = metadata.version("pstmt")
except metadata.PackageNotFoundError:
    __version__ = "unknown"
