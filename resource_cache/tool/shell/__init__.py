"""Resource-cache shell command implementation."""

from .repl import ResourceShell
from .action import ShellAction

__all__ = ["ResourceShell", "ShellAction"]
