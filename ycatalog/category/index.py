"""分类只读索引

每次拉取扁平列表后构建一次，显式传给需要按 ID 查名称、查祖先、
查子孙的调用方，替代全局的分类查找上下文。

使用示例:
    index = CategoryIndex(records)
    index["B"].name                 # "Boots"
    index.get_name("missing", "-")  # "-"
    [r.id for r in index.breadcrumb("B")]   # ["A", "B"]
    index.descendant_ids("A")       # {"B"}
"""

from collections.abc import Mapping
from typing import Dict, Iterator, List, Optional, Sequence, Set

from .schemas import CategoryRecord


class CategoryIndex(Mapping):
    """id -> CategoryRecord 的只读映射

    祖先/子孙遍历都带访问集合，脏数据中的环不会导致死循环。
    ID 重复时，以第一次出现的记录为准。
    """

    def __init__(self, records: Sequence[CategoryRecord]):
        self._records: Dict[str, CategoryRecord] = {}
        self._children: Dict[str, List[str]] = {}
        for record in records:
            if record.id in self._records:
                continue
            self._records[record.id] = record
        for record in self._records.values():
            if record.parent_id is not None and record.parent_id != record.id:
                self._children.setdefault(record.parent_id, []).append(record.id)

    def __getitem__(self, category_id: str) -> CategoryRecord:
        return self._records[category_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"CategoryIndex(size={len(self._records)})"

    def get_name(self, category_id: Optional[str], default: Optional[str] = None) -> Optional[str]:
        """按 ID 取分类名称"""
        record = self._records.get(category_id) if category_id is not None else None
        return record.name if record else default

    def children_of(self, category_id: Optional[str]) -> List[CategoryRecord]:
        """直接子分类（输入顺序）；传 None 返回 parent_id 为空的根分类"""
        if category_id is None:
            return [r for r in self._records.values() if r.parent_id is None]
        return [self._records[cid] for cid in self._children.get(category_id, [])]

    def ancestors(self, category_id: str) -> List[CategoryRecord]:
        """祖先列表，从直接父分类到根；父分类缺失或遇到环时停止"""
        result: List[CategoryRecord] = []
        visited = {category_id}
        record = self._records.get(category_id)
        while record is not None and record.parent_id is not None:
            if record.parent_id in visited:
                break
            visited.add(record.parent_id)
            record = self._records.get(record.parent_id)
            if record is not None:
                result.append(record)
        return result

    def breadcrumb(self, category_id: str) -> List[CategoryRecord]:
        """面包屑：从根到该分类（含自身）；分类不存在时返回空列表"""
        record = self._records.get(category_id)
        if record is None:
            return []
        return list(reversed(self.ancestors(category_id))) + [record]

    def descendant_ids(self, category_id: str) -> Set[str]:
        """所有子孙分类ID（不含自身）"""
        result: Set[str] = set()
        stack = list(self._children.get(category_id, []))
        while stack:
            current = stack.pop()
            if current in result or current == category_id:
                continue
            result.add(current)
            stack.extend(self._children.get(current, []))
        return result

    def find_by_path(self, path: str) -> Optional[CategoryRecord]:
        """按 URL 路径或原始路径查找（忽略首尾斜杠）"""
        target = path.strip("/")
        if not target:
            return None
        for record in self._records.values():
            if record.url_path.strip("/") == target:
                return record
            if record.path is not None and record.path.strip("/") == target:
                return record
        return None

    def find_by_slug(self, slug: str) -> Optional[CategoryRecord]:
        for record in self._records.values():
            if record.slug == slug:
                return record
        return None
