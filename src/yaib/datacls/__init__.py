from .contexts import BuildContext

__all__ = ['BuildContext']
