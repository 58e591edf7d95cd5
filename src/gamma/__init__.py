"""Gamma: a front end for a minimal lambda-calculus surface language."""

__version__ = "0.1.0"
