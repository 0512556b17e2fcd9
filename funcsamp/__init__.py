"""Convergence study of 2D sampling sequences for Monte Carlo integration."""

__version__ = "0.1.0"
