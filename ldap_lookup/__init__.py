"""Directory lookup: users by login or full name, group membership expansion."""

__version__ = "1.0.0"
