"""
YCatalog - 商品分类树基础库

提供分类树构建、搜索过滤、父分类候选，以及配套的响应封装、异常处理、日志和配置功能
"""

from .version import __version__, __author__, __description__

# 导出响应模块
from .response import (
    Resp,
    OK,
    NotFound,
    ItemResponse,
)

# 导出异常模块
from .exceptions import (
    Err,
    ErrorCode,
    BusinessException,
    ResourceNotFoundException,
    ValidationException,
    register_exception_handlers,
)

# 导出日志模块
from .log import (
    setup_logger,
    setup_root_logger,
    get_logger,
)

# 导出配置模块
from .config import (
    AppSettings,
    LoggingSettings,
    CategoryTreeSettings,
    ConfigLoader,
    load_yaml_config,
)

# 导出分类树模块
from .category import (
    CategoryRecord,
    CategoryNode,
    FlatCategory,
    CategoryIndex,
    build_category_tree,
    build_tree_from_raw,
    filter_category_tree,
    flatten_category_tree,
    valid_parents,
    validate_parent_assignment,
    reconcile_selection,
    CategoryTreeService,
    create_category_tree_router,
)

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    # 响应
    "Resp",
    "OK",
    "NotFound",
    "ItemResponse",
    # 异常
    "Err",
    "ErrorCode",
    "BusinessException",
    "ResourceNotFoundException",
    "ValidationException",
    "register_exception_handlers",
    # 日志
    "setup_logger",
    "setup_root_logger",
    "get_logger",
    # 配置
    "AppSettings",
    "LoggingSettings",
    "CategoryTreeSettings",
    "ConfigLoader",
    "load_yaml_config",
    # 分类树
    "CategoryRecord",
    "CategoryNode",
    "FlatCategory",
    "CategoryIndex",
    "build_category_tree",
    "build_tree_from_raw",
    "filter_category_tree",
    "flatten_category_tree",
    "valid_parents",
    "validate_parent_assignment",
    "reconcile_selection",
    "CategoryTreeService",
    "create_category_tree_router",
]
