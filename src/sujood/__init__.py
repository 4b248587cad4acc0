"""Sujood - offline prayer times, Hijri dates and next-prayer countdowns."""

__version__ = "0.1.0"
