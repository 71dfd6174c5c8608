"""分类树搜索过滤

按名称或 URL 路径搜索，保留匹配节点及其完整祖先链，
这样搜索孙级分类时依然能看到从根到该分类的整条路径。

使用示例:
    filtered = filter_category_tree(tree, "boot")
    span = highlight_match("Winter Boots", "boot")   # MatchSpan(start=7, length=4)
"""

from typing import List, Optional, Tuple

from .schemas import CategoryNode, MatchSpan
from .traversal import rebuild_tree


def normalize_search_term(term: Optional[str]) -> str:
    """搜索词归一化：去除首尾空白并转小写"""
    return (term or "").strip().lower()


def node_matches(node: CategoryNode, needle: str) -> bool:
    """节点自身是否匹配（needle 需已归一化）"""
    return needle in node.name.lower() or needle in node.url_path.lower()


def _filter_nodes(nodes: List[CategoryNode], needle: str) -> List[CategoryNode]:
    def keep(node: CategoryNode, children: List[CategoryNode]) -> Optional[CategoryNode]:
        if node_matches(node, needle) or children:
            return node.with_children(children)
        return None

    return rebuild_tree(nodes, keep)


def filter_category_tree(forest: List[CategoryNode], term: Optional[str]) -> List[CategoryNode]:
    """过滤分类树

    Args:
        forest: 分类森林
        term: 搜索词，为空或只有空白时不过滤

    Returns:
        搜索词为空时返回传入的同一个列表对象（便于 UI 层做引用比较）；
        否则返回新的森林，只包含匹配节点及其祖先，原树不被修改
    """
    needle = normalize_search_term(term)
    if not needle:
        return forest
    return _filter_nodes(forest, needle)


def highlight_match(name: str, needle: Optional[str]) -> Optional[MatchSpan]:
    """定位名称中第一次出现搜索词的位置

    Returns:
        匹配区间；搜索词为空或未匹配时返回 None
    """
    normalized = normalize_search_term(needle)
    if not normalized:
        return None
    idx = name.lower().find(normalized)
    if idx == -1:
        return None
    return MatchSpan(start=idx, length=len(normalized))


def split_highlight(name: str, needle: Optional[str]) -> Tuple[str, str, str]:
    """按匹配区间把名称拆成 (前缀, 匹配部分, 后缀)，未匹配时为 (name, "", "")"""
    span = highlight_match(name, needle)
    if span is None:
        return name, "", ""
    return name[:span.start], name[span.start:span.end], name[span.end:]
