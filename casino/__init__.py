"""
Casino - 赌场运营模拟命令解释器

Layers:
    core: 纯领域逻辑（命令解析、玩家目录、层级校验、游戏状态）
    application: 命令执行和配置服务
    ui: 命令行界面
"""

__version__ = "1.0.0"
