"""Typed, cached gateway to the Belgian SAM v2 medicines registry."""

__version__ = "0.1.0"
