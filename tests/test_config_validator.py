"""配置单元测试

测试配置 Schema 验证、默认配置和配置文件加载
"""

import json

import pytest

from storeman.config import (
    STOREMAN_SCHEMA,
    ConfigValidationError,
    ConfigValidator,
    StoremanConfig,
    build_json_schema,
    get_default_config,
    get_validator,
)


class TestConfigValidator:
    """测试配置验证器"""

    @pytest.fixture
    def validator(self):
        """创建验证器实例"""
        return ConfigValidator()

    @pytest.fixture
    def sample_schema(self):
        """示例 Schema"""
        return {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "retries": {"type": "integer", "minimum": 0, "maximum": 10},
            },
            "required": ["name"],
        }

    def test_default_schema_registered(self, validator):
        """测试默认注册 Storeman Schema"""
        assert STOREMAN_SCHEMA in validator.list_schemas()
        assert validator.get_schema(STOREMAN_SCHEMA) == build_json_schema()

    def test_validate_default_config(self, validator):
        """测试默认配置可以通过验证"""
        assert validator.validate(get_default_config()) is True

    def test_validate_wrong_type(self, validator):
        """测试类型错误"""
        config = get_default_config()
        config["restore"]["force_refresh"] = "yes"

        with pytest.raises(ConfigValidationError) as exc_info:
            validator.validate(config)

        assert "路径: restore -> force_refresh" in exc_info.value.errors

    def test_validate_invalid_option(self, validator):
        """测试取值不在选项中"""
        config = get_default_config()
        config["log"]["level"] = "VERBOSE"

        with pytest.raises(ConfigValidationError):
            validator.validate(config)

    def test_register_and_validate(self, validator, sample_schema):
        """测试注册自定义 Schema"""
        validator.register_schema("sample", sample_schema)

        assert validator.validate({"name": "a", "retries": 3}, "sample") is True
        with pytest.raises(ConfigValidationError):
            validator.validate({"name": "a", "retries": 20}, "sample")
        with pytest.raises(ConfigValidationError):
            validator.validate({"retries": 1}, "sample")

    def test_unregister_schema(self, validator, sample_schema):
        """测试注销 Schema"""
        validator.register_schema("sample", sample_schema)
        validator.unregister_schema("sample")

        assert validator.get_schema("sample") is None
        with pytest.raises(ConfigValidationError):
            validator.validate({"name": "a"}, "sample")

    def test_get_validator_singleton(self):
        """测试全局验证器单例"""
        assert get_validator() is get_validator()


class TestConfigValidationError:
    """测试配置验证错误"""

    def test_error_with_errors_list(self):
        """测试携带错误列表"""
        error = ConfigValidationError("配置验证失败", errors=["a", "b"])
        assert str(error) == "配置验证失败"
        assert error.errors == ["a", "b"]

    def test_error_without_errors(self):
        """测试默认错误列表为空"""
        assert ConfigValidationError("失败").errors == []


class TestStoremanConfig:
    """测试配置类"""

    def test_defaults_without_file(self):
        """测试无配置文件时使用默认配置"""
        config = StoremanConfig()

        assert config.config_path is None
        assert config.get("repos.name_prefix") == "openrepos-"
        assert config.repos["installed_repo"] == "installed"
        assert config.get("restore.refresh_before_search") is False

    def test_creates_file(self, tmp_path):
        """测试配置文件不存在时创建"""
        path = tmp_path / "config" / "storeman.json"
        config = StoremanConfig(path)

        assert path.is_file()
        with open(path, "r", encoding="utf-8") as f:
            assert json.load(f) == dict(config)

    def test_fills_missing_keys(self, tmp_path):
        """测试补全缺失的配置项"""
        path = tmp_path / "storeman.json"
        path.write_text(json.dumps({"repos": {"name_prefix": "custom-"}}), encoding="utf-8")

        config = StoremanConfig(path)

        assert config.get("repos.name_prefix") == "custom-"
        assert config.get("repos.base_url") == get_default_config()["repos"]["base_url"]
        assert "backup" in config
        with open(path, "r", encoding="utf-8") as f:
            assert json.load(f)["backup"]["file_suffix"] == ".ini"

    def test_invalid_file(self, tmp_path):
        """测试配置文件验证失败"""
        path = tmp_path / "storeman.json"
        path.write_text(json.dumps({"log": {"level": 5}}), encoding="utf-8")

        with pytest.raises(ConfigValidationError):
            StoremanConfig(path)

    def test_get_and_set(self):
        """测试点号路径读写"""
        config = StoremanConfig()
        config.set("backup.directory", "/tmp/backups")
        config.set("extra.nested.value", 1)

        assert config.get("backup.directory") == "/tmp/backups"
        assert config.get("extra.nested.value") == 1
        assert config.get("missing.key", "default") == "default"
        assert config.get("repos.name_prefix.too_deep", "x") == "x"

    def test_attribute_access(self):
        """测试属性访问"""
        config = StoremanConfig()
        config.custom = {"a": 1}

        assert config["custom"] == {"a": 1}
        with pytest.raises(AttributeError):
            config.missing_section

    def test_save_and_reload(self, tmp_path):
        """测试保存后重新加载"""
        path = tmp_path / "storeman.json"
        config = StoremanConfig(path)
        config.set("log.level", "DEBUG")
        config.save()

        assert StoremanConfig(path).get("log.level") == "DEBUG"
