"""Storeman 配置管理

提供配置模型、默认值和 Schema 验证
"""

from .schema import CONFIG_SCHEMA, build_json_schema, get_default_config
from .storeman_config import StoremanConfig
from .validator import (
    STOREMAN_SCHEMA,
    ConfigValidationError,
    ConfigValidator,
    get_validator,
)

__all__ = [
    "CONFIG_SCHEMA",
    "build_json_schema",
    "get_default_config",
    "StoremanConfig",
    "STOREMAN_SCHEMA",
    "ConfigValidationError",
    "ConfigValidator",
    "get_validator",
]
