"""FormFlow - form building backend"""

__version__ = "1.0.0"
