"""
UI Layer - 用户界面层

只依赖应用层和核心层的公共接口。
"""
