'''Configuration package for the AI review engine.'''
from .settings import settings, Settings

__all__ = ['settings', 'Settings']
