"""
yaib Builder Module

- Builder: lifecycle driver and host/sandbox execution mode decision
"""

from .build import Builder

__all__ = ['Builder']
