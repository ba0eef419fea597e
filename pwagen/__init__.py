"""
pwagen — turn a web app manifest into a native Android project skeleton.
"""

__version__ = "0.1.0"
