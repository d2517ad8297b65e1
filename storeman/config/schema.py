"""Storeman 配置 Schema 定义

按分组描述配置项，可生成默认配置和 JSON Schema
"""

import copy


CONFIG_SCHEMA = {
    "repos_group": {
        "name": "仓库设置",
        "metadata": {
            "repos": {
                "type": "object",
                "description": "OpenRepos 仓库配置",
                "items": {
                    "name_prefix": {
                        "type": "string",
                        "default": "openrepos-",
                        "hint": "仓库别名前缀",
                    },
                    "base_url": {
                        "type": "string",
                        "default": "https://sailfish.openrepos.net/{author}/personal/main",
                        "hint": "仓库地址模板，{author} 为作者名",
                    },
                    "installed_repo": {
                        "type": "string",
                        "default": "installed",
                        "hint": "软件包索引中表示已安装软件包的仓库名",
                    },
                },
            }
        },
    },
    "backup_group": {
        "name": "备份设置",
        "metadata": {
            "backup": {
                "type": "object",
                "description": "备份文件配置",
                "items": {
                    "directory": {
                        "type": "string",
                        "default": "",
                        "hint": "备份目录，留空使用 data/backups",
                    },
                    "file_suffix": {
                        "type": "string",
                        "default": ".ini",
                        "hint": "备份文件扩展名",
                    },
                },
            }
        },
    },
    "restore_group": {
        "name": "恢复设置",
        "metadata": {
            "restore": {
                "type": "object",
                "description": "恢复流程配置",
                "items": {
                    "refresh_before_search": {
                        "type": "bool",
                        "default": False,
                        "hint": "添加仓库后先刷新缓存再搜索软件包",
                    },
                    "force_refresh": {
                        "type": "bool",
                        "default": False,
                        "hint": "强制刷新软件包缓存",
                    },
                },
            }
        },
    },
    "log_group": {
        "name": "日志设置",
        "metadata": {
            "log": {
                "type": "object",
                "description": "日志配置",
                "items": {
                    "level": {
                        "type": "string",
                        "default": "INFO",
                        "options": ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
                        "hint": "日志级别",
                    },
                    "file_enabled": {
                        "type": "bool",
                        "default": False,
                        "hint": "是否写入日志文件",
                    },
                },
            }
        },
    },
}

# Schema 字段类型到 JSON Schema 类型的映射
_JSON_TYPES = {
    "string": "string",
    "int": "integer",
    "float": "number",
    "bool": "boolean",
    "list": "array",
    "object": "object",
}


def get_default_config() -> dict:
    """从 Schema 生成默认配置"""
    config = {}
    for group_name, group_data in CONFIG_SCHEMA.items():
        for section_name, section_data in group_data["metadata"].items():
            if section_data["type"] == "object":
                config[section_name] = {
                    field_name: copy.deepcopy(field_data["default"])
                    for field_name, field_data in section_data["items"].items()
                }
            else:
                config[section_name] = copy.deepcopy(section_data["default"])
    return config


def _field_schema(field_data: dict) -> dict:
    schema = {"type": _JSON_TYPES[field_data["type"]]}
    if "options" in field_data:
        schema["enum"] = list(field_data["options"])
    validation = field_data.get("validation", {})
    if "min" in validation:
        schema["minimum"] = validation["min"]
    if "max" in validation:
        schema["maximum"] = validation["max"]
    return schema


def build_json_schema() -> dict:
    """将配置 Schema 转换为 JSON Schema"""
    properties = {}
    for group_data in CONFIG_SCHEMA.values():
        for section_name, section_data in group_data["metadata"].items():
            if section_data["type"] == "object":
                properties[section_name] = {
                    "type": "object",
                    "properties": {
                        field_name: _field_schema(field_data)
                        for field_name, field_data in section_data["items"].items()
                    },
                }
            else:
                properties[section_name] = _field_schema(section_data)
    return {"type": "object", "properties": properties}


__all__ = ["CONFIG_SCHEMA", "get_default_config", "build_json_schema"]
