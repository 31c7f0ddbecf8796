"""Keep stacked workspaces rebased and their change caches in sync."""

__version__ = "0.1.0"
