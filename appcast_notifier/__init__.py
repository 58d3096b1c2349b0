"""Appcast Notifier.

Checks a Sparkle-style appcast for releases newer than the running
application and tells the user about them.
"""

__version__ = "1.0.0"
