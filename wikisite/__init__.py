from .builder import build_site
from .config import BuildOptions
from .parser import PageAttributes, parse_markdown

__version__ = "0.1.0"

__all__ = ["BuildOptions", "PageAttributes", "build_site", "parse_markdown", "__version__"]
