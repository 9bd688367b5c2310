import sys

from colorama import Fore, Style, just_fix_windows_console

just_fix_windows_console()


class ConsoleColors:
    """Terminal colors for console output"""
    GREEN = Fore.GREEN
    YELLOW = Fore.YELLOW
    RED = Fore.RED
    BOLD = Style.BRIGHT
    ENDC = Style.RESET_ALL


def colored(text: str, color: str, enabled: bool = True) -> str:
    if enabled and sys.stdout.isatty():
        return f"{color}{text}{ConsoleColors.ENDC}"
    return text


class ConsoleFormatter:
    """Formatters for ping console output"""

    def __init__(self, colors: bool = True):
        self.colors = colors

    def _paint(self, text: str, color: str) -> str:
        return colored(text, color, self.colors)

    def error(self, msg: str) -> str:
        return self._paint(f"[✗] {msg}", ConsoleColors.RED)

    def banner(self, host: str, address: str, payload_size: int, packet_size: int) -> str:
        return self._paint(
            f"PING {host} ({address}) {payload_size}({packet_size}) bytes of data.",
            ConsoleColors.BOLD,
        )

    def reply(self, nbytes: int, address: str, sequence: int, time_ms: float,
              truncated: bool = False) -> str:
        line = f"{nbytes} bytes from {address}: icmp_seq={sequence} time={time_ms:.3f} ms"
        if truncated:
            line += " (truncated)"
        return self._paint(line, ConsoleColors.GREEN)

    def no_reply(self, address: str, sequence: int, reason: str) -> str:
        return self._paint(f"From {address} icmp_seq={sequence} {reason}", ConsoleColors.YELLOW)
