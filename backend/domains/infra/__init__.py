"""
基础设施层

- llm: 基于 LangChain 的 LLM 网关
- logging: 基于 structlog 的结构化日志

纯技术模块，不包含笔记业务逻辑。
"""
