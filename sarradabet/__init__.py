"""SarradaBet betting-market API."""

__version__ = "1.0.0"
