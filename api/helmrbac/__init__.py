"""Helm RBAC object-name resolver."""

__version__ = "0.1.0"
