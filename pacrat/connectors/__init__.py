# pacrat/connectors/__init__.py
"""
Snapshot store targets
"""

from .local_target import LocalTargetConnector

__all__ = ['LocalTargetConnector']
