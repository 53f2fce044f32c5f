"""tallybook: turn pasted Markdown purchase tables into tracked expenses."""

__version__ = "0.1.0"
