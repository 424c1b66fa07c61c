"""
游戏状态模块
"""

from .game_state import GameState

__all__ = ['GameState']
