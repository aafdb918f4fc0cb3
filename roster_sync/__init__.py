"""roster-sync: reconcile a user registry into a directory service."""

__version__ = "0.1.0"
