"""
scrollvis: a scroll-driven narrative chart of Apple's stock price and revenue.
"""

__version__ = "0.1.0"
