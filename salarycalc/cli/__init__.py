"""Salary Calc command-line interface."""
