"""Salary Calc - take-home pay breakdowns from a remote tax calculation service."""

__version__ = "0.1.0"
