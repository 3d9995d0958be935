"""Patient record monitor: dates, records, id/disease/country indexes and a command interpreter."""

__version__ = "0.1.0"
__all__ = ["__version__"]