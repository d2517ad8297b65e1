"""配置 Schema 验证器

基于 JSON Schema 验证配置文件
"""

from typing import Any, Dict, List, Optional

from jsonschema import ValidationError, validate
from loguru import logger

from .schema import build_json_schema


STOREMAN_SCHEMA = "storeman"


class ConfigValidationError(Exception):
    """配置验证错误"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class ConfigValidator:
    """配置验证器

    按名称注册 Schema，默认注册 Storeman 配置 Schema
    """

    def __init__(self):
        self._schemas: Dict[str, dict] = {STOREMAN_SCHEMA: build_json_schema()}

    def register_schema(self, name: str, schema: dict) -> None:
        """注册 Schema

        Args:
            name: Schema 名称
            schema: Schema 字典
        """
        self._schemas[name] = schema
        logger.debug(f"已注册 Schema: {name}")

    def unregister_schema(self, name: str) -> None:
        """注销 Schema"""
        if name in self._schemas:
            del self._schemas[name]
            logger.debug(f"已注销 Schema: {name}")

    def validate(self, config: dict, schema_name: str = STOREMAN_SCHEMA) -> bool:
        """验证配置

        Args:
            config: 配置字典
            schema_name: Schema 名称

        Returns:
            验证通过时返回 True

        Raises:
            ConfigValidationError: Schema 不存在或验证失败
        """
        if schema_name not in self._schemas:
            raise ConfigValidationError(f"Schema 不存在: {schema_name}")

        try:
            validate(instance=config, schema=self._schemas[schema_name])
        except ValidationError as e:
            raise ConfigValidationError(
                f"配置验证失败: {schema_name}", errors=self._format_validation_error(e)
            ) from e

        logger.debug(f"配置验证通过: {schema_name}")
        return True

    def _format_validation_error(self, error: Any) -> List[str]:
        """格式化验证错误

        Args:
            error: jsonschema ValidationError

        Returns:
            错误信息列表
        """
        errors = [str(error.message)]

        if error.path:
            path_str = " -> ".join(str(p) for p in error.path)
            errors.append(f"路径: {path_str}")

        return errors

    def get_schema(self, name: str) -> Optional[dict]:
        """获取 Schema"""
        return self._schemas.get(name)

    def list_schemas(self) -> List[str]:
        """列出所有已注册的 Schema"""
        return list(self._schemas.keys())


_global_validator: Optional[ConfigValidator] = None


def get_validator() -> ConfigValidator:
    """获取全局配置验证器实例"""
    global _global_validator
    if _global_validator is None:
        _global_validator = ConfigValidator()
    return _global_validator


__all__ = [
    "STOREMAN_SCHEMA",
    "ConfigValidationError",
    "ConfigValidator",
    "get_validator",
]
