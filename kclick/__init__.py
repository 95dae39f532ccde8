"""Listing, completion, events, logs, exec and delete helpers for an interactive Kubernetes shell."""

__version__ = "0.1.0"