"""
限额模块

按自然周期统计玩家取款额度。
"""

from .limit_tracker import LimitTracker

__all__ = ['LimitTracker']
