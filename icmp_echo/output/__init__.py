from .console import ConsoleFormatter, ConsoleColors, colored

__all__ = [
    'ConsoleFormatter',
    'ConsoleColors',
    'colored',
]
