"""Remote configuration refresh for fronted network clients"""

__version__ = "1.0.0"
