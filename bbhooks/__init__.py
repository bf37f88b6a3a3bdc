"""Bitbucket Server push hook processing service."""

__version__ = "0.1.0"
