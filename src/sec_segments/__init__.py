"""SEC EDGAR consolidated metrics and segment revenue extraction."""

__version__ = "0.1.0"
