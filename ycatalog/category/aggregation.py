"""分类树工具函数

商品数汇总、空分支裁剪、启用过滤、叶子提取、节点查找等。
所有函数都返回新的节点对象，不修改传入的树。

使用示例:
    tree = roll_up_product_counts(tree, {"B": 3})
    tree = prune_empty_branches(tree)
    leaves = leaf_categories(tree)
    path = get_node_path(tree, "B")   # [A, B]
"""

from typing import Dict, List, Mapping, Optional, Tuple

from .schemas import CategoryNode, FlatCategory
from .traversal import rebuild_tree, walk_pre_order


def roll_up_product_counts(
    forest: List[CategoryNode],
    direct_counts: Optional[Mapping[str, int]] = None,
) -> List[CategoryNode]:
    """自底向上汇总商品数

    Args:
        forest: 分类森林
        direct_counts: 分类ID -> 直属商品数；为 None 时使用节点已有的 direct_product_count，
            提供时未出现的分类计为 0

    Returns:
        新森林，total_product_count = 直属商品数 + 所有子节点的 total_product_count
    """
    def roll_up(node: CategoryNode, children: List[CategoryNode]) -> CategoryNode:
        direct = node.direct_product_count if direct_counts is None else direct_counts.get(node.id, 0)
        total = direct + sum(child.total_product_count for child in children)
        return node.with_children(children, direct_product_count=direct, total_product_count=total)

    return rebuild_tree(forest, roll_up)


def prune_empty_branches(
    forest: List[CategoryNode],
    fallback_to_full: bool = True,
) -> List[CategoryNode]:
    """裁剪商品总数为 0 的分支

    Args:
        forest: 已汇总过商品数的分类森林
        fallback_to_full: 全部被裁剪时是否返回原森林（避免前台出现空的分类导航）
    """
    pruned = rebuild_tree(forest, _keep_non_empty)
    if not pruned and fallback_to_full:
        return forest
    return pruned


def _keep_non_empty(node: CategoryNode, children: List[CategoryNode]) -> Optional[CategoryNode]:
    if node.total_product_count <= 0:
        return None
    return node.with_children(children)


def _keep_active(node: CategoryNode, children: List[CategoryNode]) -> Optional[CategoryNode]:
    return node.with_children(children) if node.is_active else None


def filter_active(forest: List[CategoryNode]) -> List[CategoryNode]:
    """只保留启用的分类，停用分类连同其子树一起移除"""
    return rebuild_tree(forest, _keep_active)


def leaf_categories(forest: List[CategoryNode]) -> List[FlatCategory]:
    """先序提取所有叶子分类（没有子分类的节点）"""
    return [
        FlatCategory(id=node.id, name=node.name, path=node.url_path, depth=depth)
        for node, depth in walk_pre_order(forest)
        if not node.children
    ]


def find_node(forest: List[CategoryNode], target_id: str) -> Optional[CategoryNode]:
    """在树中查找指定 ID 的节点，未找到返回 None"""
    for node, _ in walk_pre_order(forest):
        if node.id == target_id:
            return node
    return None


def get_node_path(forest: List[CategoryNode], target_id: str) -> List[CategoryNode]:
    """获取从根到目标节点的路径，未找到返回空列表"""
    parent_of: Dict[int, Optional[CategoryNode]] = {}
    stack: List[Tuple[CategoryNode, Optional[CategoryNode]]] = [
        (node, None) for node in reversed(forest)
    ]
    while stack:
        node, parent = stack.pop()
        parent_of[id(node)] = parent
        if node.id == target_id:
            path = [node]
            while parent is not None:
                path.append(parent)
                parent = parent_of[id(parent)]
            path.reverse()
            return path
        stack.extend((child, node) for child in reversed(node.children))
    return []


def calculate_tree_depth(forest: List[CategoryNode]) -> int:
    """计算树的最大层数，空森林为 0"""
    return max((depth + 1 for _, depth in walk_pre_order(forest)), default=0)
