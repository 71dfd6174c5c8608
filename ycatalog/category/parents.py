"""父分类候选与循环引用校验

编辑分类时，父分类下拉框只能出现合法的候选：
- 始终排除正在编辑的分类自身
- exclude_descendants=True 时，同时排除它的整棵子树
  （否则把分类挂到自己的子孙下面会在持久化数据中形成环）

持久化前的最终防线是 validate_parent_assignment。
"""

from typing import List, Optional, Sequence

from ycatalog.exceptions import Err, ErrorCode
from ycatalog.log import get_logger
from .flattener import flatten_category_tree
from .index import CategoryIndex
from .schemas import CategoryRecord, FlatCategory
from .tree_builder import SORT_BY_NAME, build_category_tree

logger = get_logger()


def valid_parents(
    records: Sequence[CategoryRecord],
    editing_id: Optional[str],
    exclude_descendants: bool = False,
) -> List[CategoryRecord]:
    """计算可作为父分类的候选记录

    Args:
        records: 扁平分类记录
        editing_id: 正在编辑的分类ID；新建分类时为 None
        exclude_descendants: 是否同时排除 editing_id 的所有子孙分类

    Returns:
        候选记录列表，保持输入顺序
    """
    if editing_id is None:
        return list(records)

    excluded = {editing_id}
    if exclude_descendants:
        excluded |= CategoryIndex(records).descendant_ids(editing_id)

    return [record for record in records if record.id not in excluded]


def parent_options(
    records: Sequence[CategoryRecord],
    editing_id: Optional[str] = None,
    exclude_descendants: bool = False,
    sort_by: str = SORT_BY_NAME,
) -> List[FlatCategory]:
    """父分类下拉框选项：过滤候选 -> 建树 -> 展平"""
    candidates = valid_parents(records, editing_id, exclude_descendants)
    return flatten_category_tree(build_category_tree(candidates, sort_by=sort_by))


def would_create_cycle(
    index: CategoryIndex,
    category_id: str,
    new_parent_id: Optional[str],
) -> bool:
    """把 category_id 挂到 new_parent_id 下是否会形成环"""
    if new_parent_id is None:
        return False
    if category_id == new_parent_id:
        return True
    # 新父分类的祖先中包含当前分类，即新父分类是当前分类的子孙
    return any(record.id == category_id for record in index.ancestors(new_parent_id))


def validate_parent_assignment(
    records: Sequence[CategoryRecord],
    category_id: str,
    new_parent_id: Optional[str],
) -> None:
    """校验父分类修改是否合法，在保存分类前调用

    Raises:
        ResourceNotFoundException: 新父分类不存在
        ValidationException: 新父分类是分类自身或其子孙分类
    """
    if new_parent_id is None:
        return

    index = CategoryIndex(records)
    if new_parent_id not in index:
        raise Err.not_found(
            "父分类不存在",
            code=ErrorCode.CATEGORY_NOT_FOUND,
            resource_type="Category",
            resource_id=new_parent_id,
        )

    if would_create_cycle(index, category_id, new_parent_id):
        logger.warning(
            f"Rejected parent assignment {category_id} -> {new_parent_id}: circular reference"
        )
        raise Err.invalid(
            "不能将分类移动到自身或其子分类下",
            code=ErrorCode.CIRCULAR_REFERENCE,
            details=[f"分类 {category_id} 不能以 {new_parent_id} 作为父分类"],
            field="parent_id",
        )
