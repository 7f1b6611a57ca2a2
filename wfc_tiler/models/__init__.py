from .settings import SolveSettings

__all__ = ['SolveSettings']
