"""分类树模块

把后端返回的扁平分类记录构建为有序森林，并提供搜索过滤、父分类候选、
平铺下拉框、选中态与展开状态维护等功能。

快速开始:
    from ycatalog.category import build_tree_from_raw, filter_category_tree

    tree = build_tree_from_raw(api_response["data"])
    filtered = filter_category_tree(tree, "boot")

    # 或使用组合好的服务
    from ycatalog.category import CategoryTreeService

    service = CategoryTreeService()
    service.load(api_response["data"])
    service.parent_options(editing_id="B")
"""

from .schemas import (
    CategorySchema,
    CategoryRecord,
    CategoryNode,
    FlatCategory,
    MatchSpan,
    ParentAssignment,
)

from .traversal import walk_pre_order, rebuild_tree

from .tree_builder import (
    SORT_BY_NAME,
    SORT_BY_SORT,
    parse_category_records,
    collation_key,
    get_sort_key,
    build_category_tree,
    build_tree_from_raw,
)

from .tree_filter import (
    normalize_search_term,
    node_matches,
    filter_category_tree,
    highlight_match,
    split_highlight,
)

from .flattener import (
    flatten_category_tree,
    count_nodes,
)

from .index import CategoryIndex

from .parents import (
    valid_parents,
    parent_options,
    would_create_cycle,
    validate_parent_assignment,
)

from .aggregation import (
    roll_up_product_counts,
    prune_empty_branches,
    filter_active,
    leaf_categories,
    find_node,
    get_node_path,
    calculate_tree_depth,
)

from .selection import (
    reconcile_selection,
    SelectionController,
)

from .expansion import (
    DEFAULT_OPEN_DEPTH,
    compute_expansion_state,
    ExpansionController,
)

from .service import CategoryTreeService
from .api import create_category_tree_router

__all__ = [
    # 数据模型
    "CategorySchema",
    "CategoryRecord",
    "CategoryNode",
    "FlatCategory",
    "MatchSpan",
    "ParentAssignment",
    # 遍历
    "walk_pre_order",
    "rebuild_tree",
    # 建树
    "SORT_BY_NAME",
    "SORT_BY_SORT",
    "parse_category_records",
    "collation_key",
    "get_sort_key",
    "build_category_tree",
    "build_tree_from_raw",
    # 搜索
    "normalize_search_term",
    "node_matches",
    "filter_category_tree",
    "highlight_match",
    "split_highlight",
    # 展平
    "flatten_category_tree",
    "count_nodes",
    # 索引
    "CategoryIndex",
    # 父分类候选
    "valid_parents",
    "parent_options",
    "would_create_cycle",
    "validate_parent_assignment",
    # 树工具
    "roll_up_product_counts",
    "prune_empty_branches",
    "filter_active",
    "leaf_categories",
    "find_node",
    "get_node_path",
    "calculate_tree_depth",
    # 选中与展开
    "reconcile_selection",
    "SelectionController",
    "DEFAULT_OPEN_DEPTH",
    "compute_expansion_state",
    "ExpansionController",
    # 服务与路由
    "CategoryTreeService",
    "create_category_tree_router",
]
