"""Knockout tournament bracket engine."""
