"""Funding Tracker: scrape, extract and store venture funding rounds."""

__version__ = '1.0.0'
