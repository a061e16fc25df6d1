"""Optimisation engines for salesman routing."""
