"""
Casino Tests Module - 测试框架

Test Categories:
    unit/: 单元测试 - 测试单个模块功能
    property/: 性质测试 - 验证目录结构和状态变更的不变量
    integration/: 集成测试 - 按脚本执行完整场景
"""
