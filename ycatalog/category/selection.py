"""选中态维护

每次重新拉取分类列表后，先前选中的分类可能已被删除。
reconcile_selection 负责重新校验：仍然存在则保留，否则回退到第一个根节点，
森林为空时为 None。
"""

from typing import List, Optional, Sequence

from ycatalog.exceptions import Err, ErrorCode
from ycatalog.log import get_logger
from .aggregation import get_node_path
from .schemas import CategoryNode, CategoryRecord
from .tree_builder import SORT_BY_NAME, build_category_tree

logger = get_logger()


def reconcile_selection(
    previous_id: Optional[str],
    records: Sequence[CategoryRecord],
    forest: Optional[List[CategoryNode]] = None,
) -> Optional[str]:
    """计算重新加载后应当选中的分类ID

    Args:
        previous_id: 之前选中的分类ID
        records: 最新的扁平分类记录
        forest: 已构建好的森林；不传时按默认排序现场构建，用于确定“第一个根节点”

    Returns:
        选中的分类ID
    """
    if previous_id is not None and any(record.id == previous_id for record in records):
        return previous_id

    if forest is None:
        forest = build_category_tree(records)
    fallback = forest[0].id if forest else None

    if previous_id is not None:
        logger.info(f"Selected category {previous_id} no longer exists, fallback to {fallback}")
    return fallback


class SelectionController:
    """跨重新加载维护当前选中的分类

    使用示例:
        controller = SelectionController()
        tree = controller.reload(records)     # 默认选中第一个根节点
        controller.select("B")
        controller.selected_path              # ["A", "B"]
        tree = controller.reload(new_records) # B 被删除时回退到第一个根节点
    """

    def __init__(self, sort_by: str = SORT_BY_NAME):
        self.sort_by = sort_by
        self.selected_id: Optional[str] = None
        self._forest: List[CategoryNode] = []
        self._ids = set()

    @property
    def forest(self) -> List[CategoryNode]:
        return self._forest

    def reload(self, records: Sequence[CategoryRecord]) -> List[CategoryNode]:
        """用最新记录整体替换森林，并重新校验选中态"""
        self._forest = build_category_tree(records, sort_by=self.sort_by)
        self._ids = {record.id for record in records}
        self.selected_id = reconcile_selection(self.selected_id, records, self._forest)
        return self._forest

    def select(self, category_id: str) -> str:
        """选中分类

        Raises:
            ResourceNotFoundException: 当前列表中不存在该分类
        """
        if category_id not in self._ids:
            raise Err.not_found(
                "分类不存在",
                code=ErrorCode.CATEGORY_NOT_FOUND,
                resource_type="Category",
                resource_id=category_id,
            )
        self.selected_id = category_id
        return category_id

    def clear(self):
        self.selected_id = None

    @property
    def selected_path(self) -> List[str]:
        """从根到选中节点的ID路径，未选中时为空"""
        if self.selected_id is None:
            return []
        return [node.id for node in get_node_path(self._forest, self.selected_id)]
