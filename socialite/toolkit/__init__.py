"""通用工具：HTTP 客户端、JSON、查询字符串、配置加载"""
