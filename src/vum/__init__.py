"""vum: reconcile declared git plugin sources with a local plugin directory."""

__version__ = "0.1.0"
