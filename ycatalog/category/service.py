"""分类树服务

把建树、搜索、父分类候选、选中态和展开状态组合到一个对象中，
后台分类面板、分类编辑弹窗和前台分类筛选共用同一个实例。

每次 load 都整体替换记录、索引和森林，不做增量更新。

使用示例:
    from ycatalog.category import CategoryTreeService
    from ycatalog.config import CategoryTreeSettings

    service = CategoryTreeService(CategoryTreeSettings(sort_by="sort"))
    service.load(api_response["data"])

    service.search("boot")              # 过滤后的森林
    service.parent_options("B")         # 编辑 B 时的父分类下拉框
    service.validate_parent("A", "B")   # 保存前校验，非法时抛出 ValidationException
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from ycatalog.config import CategoryTreeSettings
from ycatalog.exceptions import Err, ErrorCode
from ycatalog.log import get_logger
from .aggregation import filter_active, prune_empty_branches, roll_up_product_counts
from .expansion import ExpansionController
from .flattener import flatten_category_tree
from .index import CategoryIndex
from .parents import parent_options as build_parent_options
from .parents import validate_parent_assignment
from .schemas import CategoryNode, CategoryRecord, FlatCategory
from .selection import SelectionController
from .tree_builder import parse_category_records
from .tree_filter import filter_category_tree

logger = get_logger()


class CategoryTreeService:
    """分类树服务"""

    def __init__(self, settings: Optional[CategoryTreeSettings] = None):
        self.settings = settings or CategoryTreeSettings()
        self._records: List[CategoryRecord] = []
        self._index = CategoryIndex([])
        self._selection = SelectionController(sort_by=self.settings.sort_by)
        self._expansion = ExpansionController(default_open_depth=self.settings.default_open_depth)

    # ==================== 加载 ====================

    def load(self, raw_records: Iterable[Any]) -> List[CategoryNode]:
        """加载最新的扁平分类列表

        Args:
            raw_records: 接口返回的记录（dict / CategoryRecord / 带属性的对象）

        Returns:
            重建后的森林

        Raises:
            ValidationException: 记录缺少 id、name 或字段类型错误
        """
        records = parse_category_records(raw_records)
        self._records = records
        self._index = CategoryIndex(records)
        forest = self._selection.reload(records)
        logger.info(
            f"Loaded {len(records)} categories, selected={self._selection.selected_id}"
        )
        return forest

    @property
    def records(self) -> List[CategoryRecord]:
        return list(self._records)

    @property
    def index(self) -> CategoryIndex:
        return self._index

    @property
    def tree(self) -> List[CategoryNode]:
        return self._selection.forest

    @property
    def selected_id(self) -> Optional[str]:
        return self._selection.selected_id

    # ==================== 树视图 ====================

    def storefront_tree(self, direct_counts: Optional[Mapping[str, int]] = None) -> List[CategoryNode]:
        """前台分类树

        按配置过滤停用分类、汇总商品数、裁剪空分支（全部为空时回退到完整树）。
        """
        forest = self.tree
        if self.settings.active_only:
            forest = filter_active(forest)
        forest = roll_up_product_counts(forest, direct_counts)
        if self.settings.prune_empty_branches:
            forest = prune_empty_branches(forest, fallback_to_full=True)
        return forest

    def search(self, term: Optional[str]) -> List[CategoryNode]:
        """按名称或路径搜索，保留祖先链"""
        return filter_category_tree(self.tree, term)

    def flat_options(self, exclude_id: Optional[str] = None) -> List[FlatCategory]:
        """带层级的平铺列表，exclude_id 及其子树不输出"""
        return flatten_category_tree(self.tree, exclude_id=exclude_id)

    def parent_options(
        self,
        editing_id: Optional[str] = None,
        exclude_descendants: Optional[bool] = None,
    ) -> List[FlatCategory]:
        """父分类下拉框选项

        Args:
            editing_id: 正在编辑的分类ID，新建时为 None
            exclude_descendants: 是否排除子孙分类，None 时使用配置
                exclude_descendant_parents
        """
        if exclude_descendants is None:
            exclude_descendants = self.settings.exclude_descendant_parents
        return build_parent_options(
            self._records,
            editing_id=editing_id,
            exclude_descendants=exclude_descendants,
            sort_by=self.settings.sort_by,
        )

    # ==================== 校验与查询 ====================

    def validate_parent(self, category_id: str, parent_id: Optional[str]) -> None:
        """保存分类前校验父分类"""
        validate_parent_assignment(self._records, category_id, parent_id)

    def get(self, category_id: str) -> Optional[CategoryRecord]:
        return self._index.get(category_id)

    def require(self, category_id: str) -> CategoryRecord:
        """获取分类，不存在时抛出 ResourceNotFoundException"""
        record = self._index.get(category_id)
        if record is None:
            raise Err.not_found(
                "分类不存在",
                code=ErrorCode.CATEGORY_NOT_FOUND,
                resource_type="Category",
                resource_id=category_id,
            )
        return record

    def breadcrumb(self, category_id: str) -> List[CategoryRecord]:
        return self._index.breadcrumb(category_id)

    def find_by_path(self, path: str) -> Optional[CategoryRecord]:
        return self._index.find_by_path(path)

    # ==================== 选中与展开 ====================

    def select(self, category_id: str) -> str:
        return self._selection.select(category_id)

    def expansion(
        self,
        search_term: Optional[str] = "",
        selected_id: Optional[str] = None,
    ) -> Dict[str, bool]:
        """当前展开状态

        Args:
            search_term: 搜索词，非空时基于过滤后的森林计算
            selected_id: 选中的分类，None 时使用当前选中态
        """
        if selected_id is None:
            selected_id = self.selected_id
        return self._expansion.state(self.search(search_term), search_term, selected_id)

    def toggle_expanded(self, node_id: str, search_term: Optional[str] = "") -> bool:
        """切换节点展开状态，返回切换后的值"""
        return self._expansion.toggle(
            self.search(search_term), node_id, search_term, self.selected_id
        )
