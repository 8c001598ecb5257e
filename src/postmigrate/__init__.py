"""Migrate a Posterous blog export into an Octopress source tree."""

__version__ = "0.1.0"
