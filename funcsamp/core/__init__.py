"""Numerical core: integrand catalog, sample parsing and error estimation."""
