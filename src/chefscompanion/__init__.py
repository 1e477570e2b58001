"""Recipe discovery on top of TheMealDB."""

__version__ = "0.1.0"
