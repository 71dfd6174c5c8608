"""分类树遍历

所有遍历都使用显式栈，层级再深也不会触发递归深度限制。
"""

from typing import Callable, Iterator, List, Optional, Tuple

from .schemas import CategoryNode


def walk_pre_order(forest: List[CategoryNode]) -> Iterator[Tuple[CategoryNode, int]]:
    """先序遍历，产出 (节点, 层级)，根为第 0 层"""
    stack: List[Tuple[CategoryNode, int]] = [(node, 0) for node in reversed(forest)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        stack.extend((child, depth + 1) for child in reversed(node.children))


def rebuild_tree(
    forest: List[CategoryNode],
    visit: Callable[[CategoryNode, List[CategoryNode]], Optional[CategoryNode]],
) -> List[CategoryNode]:
    """自底向上重建森林

    先处理完所有子节点，再以 visit(原节点, 已重建的子节点列表) 生成新节点；
    visit 返回 None 时该节点不进入结果。原树不被修改。

    使用示例:
        # 去掉所有停用节点
        rebuild_tree(tree, lambda node, children: node.with_children(children) if node.is_active else None)
    """
    result: List[CategoryNode] = []
    # (节点, 结果写入的列表, 已重建的子节点；None 表示子节点尚未展开)
    stack: List[Tuple[CategoryNode, List[CategoryNode], Optional[List[CategoryNode]]]] = [
        (node, result, None) for node in reversed(forest)
    ]
    while stack:
        node, sink, children = stack.pop()
        if children is None:
            children = []
            stack.append((node, sink, children))
            stack.extend((child, children, None) for child in reversed(node.children))
            continue
        rebuilt = visit(node, children)
        if rebuilt is not None:
            sink.append(rebuilt)
    return result
