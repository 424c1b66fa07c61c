"""赌场命令解释器CLI模块."""

from .render import CLIRenderer
from .cli_app import CasinoCLI, cli, main

__all__ = ['CLIRenderer', 'CasinoCLI', 'cli', 'main']
