"""Storeman：OpenRepos 仓库管理客户端核心"""

__version__ = "0.2.0"
