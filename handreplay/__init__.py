"""
handreplay: parse poker hand-history text and step through each hand action by action.
"""

__version__ = "0.1.0"
