"""
配置模块
提供分类树工具库的默认配置，业务项目可以继承并覆盖
"""

from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings

from ..utils import parse_file_size


class LoggingSettings(BaseSettings):
    """日志配置

    使用示例:
        from ycatalog.config import LoggingSettings

        log_config = LoggingSettings(
            level="DEBUG",
            file_path="logs/catalog.log",
            file_max_bytes="20MB",
        )

        # 获取解析后的字节数
        max_bytes = log_config.parsed_file_max_bytes
    """
    level: str = Field(default="INFO", description="日志级别")
    file_path: str = Field(default="", description="日志文件路径，为空时只输出到控制台")
    file_max_bytes: str = Field(default="10MB", description="单个日志文件最大大小")
    file_backup_count: int = Field(default=5, description="保留的备份文件数量")
    file_encoding: str = Field(default="utf-8", description="文件编码")
    enable_console: bool = Field(default=True, description="是否启用控制台输出")

    @computed_field
    @property
    def parsed_file_max_bytes(self) -> int:
        """解析文件最大字节数字符串为整数"""
        return parse_file_size(self.file_max_bytes)

    class Config:
        env_prefix = "YCATALOG_LOG_"


class CategoryTreeSettings(BaseSettings):
    """分类树配置

    同一份配置同时服务于后台分类树面板、分类编辑弹窗的父分类选择器
    和前台的分类筛选控件，避免各处行为不一致。

    使用示例:
        from ycatalog.config import CategoryTreeSettings

        tree_config = CategoryTreeSettings(
            sort_by="sort",                   # 后台按 sort 字段排序
            exclude_descendant_parents=True,  # 父分类候选排除整棵子树
        )

    环境变量:
        YCATALOG_TREE_SORT_BY=name
        YCATALOG_TREE_DEFAULT_OPEN_DEPTH=2
        YCATALOG_TREE_EXCLUDE_DESCENDANT_PARENTS=false
    """
    sort_by: Literal["name", "sort"] = Field(
        default="name",
        description="同级节点排序方式: name（按名称）| sort（按 sort 字段，再按名称）"
    )
    default_open_depth: int = Field(
        default=2,
        ge=0,
        description="默认展开的层级数，depth 小于该值的节点默认展开"
    )
    exclude_descendant_parents: bool = Field(
        default=False,
        description="编辑分类时，父分类候选是否同时排除该分类的所有子孙节点"
    )
    active_only: bool = Field(
        default=False,
        description="前台分类树是否只保留启用的分类"
    )
    prune_empty_branches: bool = Field(
        default=False,
        description="前台分类树是否裁剪商品总数为 0 的分支"
    )

    class Config:
        env_prefix = "YCATALOG_TREE_"


class AppSettings(BaseSettings):
    """应用基础配置

    将各子配置类聚合为嵌套结构，业务项目继承后只需添加项目特有的配置项。

    配置优先级（从高到低）:
        环境变量 > YAML 配置文件 > 代码中的默认值

    内置子配置及环境变量前缀:
        - logging:       LoggingSettings       (YCATALOG_LOG_)
        - category_tree: CategoryTreeSettings  (YCATALOG_TREE_)

    使用示例:
        from ycatalog.config import AppSettings, load_yaml_config

        class Settings(AppSettings):
            app_name: str = "Shop Admin"

        settings = load_yaml_config("config/settings.yaml", Settings)

    YAML 配置示例 (config/settings.yaml):
        logging:
          level: "INFO"
        category_tree:
          sort_by: "sort"
          exclude_descendant_parents: true
    """
    app_name: str = Field(default="ycatalog", description="应用名称")
    debug: bool = Field(default=False, description="调试模式")
    logging: LoggingSettings = LoggingSettings()
    category_tree: CategoryTreeSettings = CategoryTreeSettings()

    class Config:
        env_prefix = "YCATALOG_"
