"""分类树展平

先序遍历（父节点在子节点之前）输出带层级信息的列表，
用于填充可缩进的父分类下拉框。
"""

from typing import List, Optional

from .schemas import CategoryNode, FlatCategory
from .traversal import walk_pre_order


def flatten_category_tree(
    forest: List[CategoryNode],
    exclude_id: Optional[str] = None,
) -> List[FlatCategory]:
    """将分类森林展平为列表

    Args:
        forest: 分类森林
        exclude_id: 需要排除的节点ID，该节点及其整棵子树都不会输出

    Returns:
        先序排列的 FlatCategory 列表

    使用示例:
        flat = flatten_category_tree(tree)
        # [A(depth=0), B(depth=1), C(depth=0)]
    """
    result: List[FlatCategory] = []
    stack = [(node, 0) for node in reversed(forest)]
    while stack:
        node, depth = stack.pop()
        if exclude_id is not None and node.id == exclude_id:
            continue
        result.append(FlatCategory(
            id=node.id,
            name=node.name,
            path=node.url_path,
            depth=depth,
            has_children=bool(node.children),
        ))
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return result


def count_nodes(forest: List[CategoryNode]) -> int:
    """统计森林中可达节点数"""
    return sum(1 for _ in walk_pre_order(forest))
