"""Convert reveal.js and Landslide slide decks into PDF documents."""

__version__ = "1.0.0"
