"""分类树构建

将扁平的分类记录列表构建为嵌套的分类森林。

使用示例:
    from ycatalog.category import build_category_tree, parse_category_records

    records = parse_category_records([
        {"id": "A", "parentId": None, "name": "Shoes"},
        {"id": "B", "parentId": "A", "name": "Boots"},
        {"id": "C", "parentId": "Z", "name": "Orphan"},
    ])
    tree = build_category_tree(records)
    # [A(children=[B]), C]  C 的父分类不存在，作为根节点保留
"""

import unicodedata
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence, Set, Union

from pydantic import TypeAdapter, ValidationError

from ycatalog.exceptions import ErrorCode, ValidationException, format_validation_errors
from ycatalog.log import get_logger
from .schemas import CategoryNode, CategoryRecord

logger = get_logger()

SORT_BY_NAME = "name"
SORT_BY_SORT = "sort"

_records_adapter = TypeAdapter(List[CategoryRecord])


def parse_category_records(
    raw_records: Iterable[Union[CategoryRecord, Mapping[str, Any], Any]],
) -> List[CategoryRecord]:
    """将接口返回的 JSON 数组（或 ORM 对象列表）解析为 CategoryRecord 列表

    Raises:
        ValidationException: 记录缺少必填字段或类型错误，details 中列出每个出错字段
    """
    items = list(raw_records)
    if all(isinstance(item, CategoryRecord) for item in items):
        return items
    try:
        return _records_adapter.validate_python(items, from_attributes=True)
    except ValidationError as e:
        details = format_validation_errors(e.errors())
        logger.warning(f"Invalid category records: {len(details)} error(s)")
        raise ValidationException(
            "分类数据格式不正确",
            code=ErrorCode.INVALID_CATEGORY_RECORD,
            details=details,
        )


def collation_key(name: str) -> str:
    """名称的排序键

    NFKD 分解后去掉组合附加符号再 casefold，
    使 "Ё" 与 "Е"、"É" 与 "E" 按同一个字母排序（Ё 排在 Ж 之前，É 排在 Z 之前）。
    """
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn").casefold()


def _name_key(node: CategoryNode):
    return (collation_key(node.name), node.name.casefold(), node.name, node.id)


def _sort_key(node: CategoryNode):
    return (node.sort,) + _name_key(node)


def get_sort_key(sort_by: str) -> Callable[[CategoryNode], Any]:
    """获取同级节点排序函数

    Args:
        sort_by: "name" 按名称（忽略大小写和附加符号）排序；"sort" 先按 sort 字段再按名称

    Raises:
        ValidationException: 不支持的排序方式
    """
    if sort_by == SORT_BY_NAME:
        return _name_key
    if sort_by == SORT_BY_SORT:
        return _sort_key
    raise ValidationException(
        f"不支持的排序方式: {sort_by}",
        code=ErrorCode.INVALID_PARAMETER,
        field="sort_by",
    )


def _sort_tree(nodes: List[CategoryNode], sort_key: Callable[[CategoryNode], Any]):
    """逐层排序根列表和所有 children"""
    pending = [nodes]
    while pending:
        siblings = pending.pop()
        siblings.sort(key=sort_key)
        pending.extend(node.children for node in siblings if node.children)


def _mark_reachable(node: CategoryNode, reachable: Set[int]):
    stack = [node]
    while stack:
        current = stack.pop()
        if id(current) in reachable:
            continue
        reachable.add(id(current))
        stack.extend(current.children)


def build_category_tree(
    records: Sequence[CategoryRecord],
    sort_by: str = SORT_BY_NAME,
) -> List[CategoryNode]:
    """将扁平分类记录构建为分类森林

    规则:
        1. 每条记录生成一个节点
        2. parent_id 为空、指向自身或指向不存在的记录时，节点作为根节点（孤儿不会被丢弃）
        3. 形成环（A→B→A）的记录从根节点不可达，按输入顺序把环上的节点
           从原父节点摘下提升为根节点，保证节点总数等于记录数
        4. 根列表和所有 children 按同级规则排序

    Args:
        records: 扁平分类记录
        sort_by: 同级排序方式，"name" 或 "sort"

    Returns:
        根节点列表
    """
    sort_key = get_sort_key(sort_by)
    if not records:
        return []

    nodes = [CategoryNode.from_record(record) for record in records]
    node_map: Dict[str, CategoryNode] = {}
    for record, node in zip(records, nodes):
        node_map.setdefault(record.id, node)

    roots: List[CategoryNode] = []
    parent_of: Dict[int, CategoryNode] = {}

    for record, node in zip(records, nodes):
        parent = node_map.get(record.parent_id) if record.parent_id is not None else None
        if parent is None or parent is node:
            roots.append(node)
        else:
            parent.children.append(node)
            parent_of[id(node)] = parent

    if len(roots) < len(nodes):
        reachable: Set[int] = set()
        for root in roots:
            _mark_reachable(root, reachable)

        promoted = []
        for node in nodes:
            if id(node) in reachable:
                continue
            parent = parent_of[id(node)]
            parent.children = [child for child in parent.children if child is not node]
            roots.append(node)
            _mark_reachable(node, reachable)
            promoted.append(node.id)

        if promoted:
            logger.warning(
                f"Circular parent references detected, promoted to root: {promoted}"
            )

    _sort_tree(roots, sort_key)
    logger.debug(f"Built category tree: {len(nodes)} nodes, {len(roots)} roots")
    return roots


def build_tree_from_raw(
    raw_records: Iterable[Union[CategoryRecord, Mapping[str, Any], Any]],
    sort_by: str = SORT_BY_NAME,
) -> List[CategoryNode]:
    """解析 + 建树的便捷函数"""
    return build_category_tree(parse_category_records(raw_records), sort_by=sort_by)
