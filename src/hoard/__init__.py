"""hoard - organize files with content-addressed storage and hardlinks."""

__version__ = "0.1.0"
