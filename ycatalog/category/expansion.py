"""树节点展开状态

默认展开前 default_open_depth 层；有搜索词时全部展开；
选中节点的所有祖先强制展开。用户手动展开/折叠会覆盖计算结果，
直到搜索词或选中节点变化时被清空。
"""

from typing import Dict, List, Optional, Tuple

from .aggregation import get_node_path
from .schemas import CategoryNode
from .traversal import walk_pre_order
from .tree_filter import normalize_search_term

DEFAULT_OPEN_DEPTH = 2


def compute_expansion_state(
    forest: List[CategoryNode],
    search_term: Optional[str] = "",
    selected_id: Optional[str] = None,
    default_open_depth: int = DEFAULT_OPEN_DEPTH,
) -> Dict[str, bool]:
    """计算每个节点是否展开

    Args:
        forest: 分类森林（通常是过滤后的森林）
        search_term: 当前搜索词
        selected_id: 当前选中的分类ID
        default_open_depth: 默认展开层数，根为第 0 层

    Returns:
        节点ID -> 是否展开
    """
    searching = bool(normalize_search_term(search_term))
    state: Dict[str, bool] = {
        node.id: searching or depth < default_open_depth
        for node, depth in walk_pre_order(forest)
    }

    if selected_id is not None:
        for ancestor in get_node_path(forest, selected_id)[:-1]:
            state[ancestor.id] = True

    return state


class ExpansionController:
    """保存用户手动展开/折叠的覆盖状态

    使用示例:
        controller = ExpansionController()
        controller.state(tree)                  # 默认状态
        controller.toggle(tree, "B")            # 折叠 B
        controller.state(tree, search_term="x") # 搜索词变化，覆盖被清空
    """

    def __init__(self, default_open_depth: int = DEFAULT_OPEN_DEPTH):
        self.default_open_depth = default_open_depth
        self._overrides: Dict[str, bool] = {}
        self._context: Tuple[str, Optional[str]] = ("", None)

    def _sync_context(self, search_term: Optional[str], selected_id: Optional[str]):
        context = (normalize_search_term(search_term), selected_id)
        if context != self._context:
            self._overrides.clear()
            self._context = context

    def state(
        self,
        forest: List[CategoryNode],
        search_term: Optional[str] = "",
        selected_id: Optional[str] = None,
    ) -> Dict[str, bool]:
        """计算结果叠加用户覆盖"""
        self._sync_context(search_term, selected_id)
        state = compute_expansion_state(
            forest, search_term, selected_id, self.default_open_depth
        )
        for node_id, expanded in self._overrides.items():
            if node_id in state:
                state[node_id] = expanded
        return state

    def toggle(
        self,
        forest: List[CategoryNode],
        node_id: str,
        search_term: Optional[str] = "",
        selected_id: Optional[str] = None,
    ) -> bool:
        """切换节点展开状态，返回切换后的值"""
        current = self.state(forest, search_term, selected_id).get(node_id, False)
        self._overrides[node_id] = not current
        return not current

    def reset(self):
        self._overrides.clear()

    @property
    def overrides(self) -> Dict[str, bool]:
        return dict(self._overrides)
