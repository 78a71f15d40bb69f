"""Reputation and ranking metrics for creators and the projects they discuss."""

__version__ = "0.1.0"
