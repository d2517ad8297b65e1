"""软件包标识

软件包标识由名称、版本、架构和来源仓库组成，
序列化为 `name;version;arch;repo` 形式的复合 ID
"""

from dataclasses import dataclass

from .version import Version


PACKAGE_ID_SEPARATOR = ";"


@dataclass(frozen=True)
class PackageIdentity:
    """软件包标识"""

    name: str
    """软件包名称"""

    version: str
    """版本字符串"""

    arch: str
    """架构"""

    repo_alias: str
    """来源仓库别名"""

    @property
    def package_id(self) -> str:
        """复合 ID"""
        return PACKAGE_ID_SEPARATOR.join(
            (self.name, self.version, self.arch, self.repo_alias)
        )

    @property
    def version_info(self) -> Version:
        """解析后的版本"""
        return Version.parse(self.version)

    @classmethod
    def from_package_id(cls, package_id: str) -> "PackageIdentity":
        """从复合 ID 解析

        Args:
            package_id: 形如 `foo;1.0;armv7hl;openrepos-alice` 的 ID

        Returns:
            软件包标识

        Raises:
            ValueError: ID 格式错误
        """
        parts = package_id.split(PACKAGE_ID_SEPARATOR)
        if len(parts) != 4 or not parts[0]:
            raise ValueError(f"无效的软件包 ID: {package_id!r}")
        return cls(*parts)

    def __str__(self) -> str:
        return self.package_id


__all__ = ["PACKAGE_ID_SEPARATOR", "PackageIdentity"]
