"""rush – batch media and file manipulation from the command line."""

__version__ = "0.3.0"
