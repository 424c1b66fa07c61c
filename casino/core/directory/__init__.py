"""
玩家目录模块

提供按玩家ID排序的平衡查找树。
"""

from .player_directory import PlayerDirectory

__all__ = ['PlayerDirectory']
