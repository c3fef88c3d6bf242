"""A small game application framework: scenes, events, a headless window, logging and resources."""

__version__ = "0.1.0"