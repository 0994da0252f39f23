# pacrat/__init__.py
"""
pacrat - track and archive modified pacman backup files
"""

__version__ = "1.0.0"
