"""Package version, reported by ``scripts/maparea_cli.py --version``."""

__version__ = "0.1.0"
