"""Chat bot toolkit: message helpers, push targets, reminders, Pixiv records and image search replies."""

__version__ = "0.1.0"