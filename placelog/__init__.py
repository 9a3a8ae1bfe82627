"""Track moves between home, office and outside, and summarise the time spent."""

__version__ = "0.1.0"