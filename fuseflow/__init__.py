"""Workflow engine building blocks: graph schemas, graphs with threads, audit logs, stores and results."""

__version__ = "0.1.0"