"""
PR History

Merged pull request and commit aggregation for changelog generation.
"""

__version__ = "0.1.0"
