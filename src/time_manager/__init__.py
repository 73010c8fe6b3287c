"""Time Manager - clock-in/clock-out backend with hours reporting."""

__version__ = "0.4.0"
