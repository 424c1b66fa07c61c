"""
层级校验模块

校验下注森林和回合森林的引用完整性。
"""

from .hierarchy_validator import HierarchyValidator

__all__ = ['HierarchyValidator']
