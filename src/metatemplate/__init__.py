"""metatemplate: compile one canonical HTML+CSS template into many template formats."""

__version__ = "0.4.0"
