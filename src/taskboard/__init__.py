"""
taskboard: personal task store with derived productivity metrics.
"""

__version__ = "0.1.0"
