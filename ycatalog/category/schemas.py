"""分类树数据模型

- CategoryRecord: 后端返回的扁平分类记录（外部输入）
- CategoryNode: 由记录构建的树节点（派生数据，每次重建都是全新对象）
- FlatCategory: 展平后的下拉选项
- MatchSpan: 搜索高亮区间

字段同时支持接口返回的 camelCase（parentId、urlPath ...）和 Python 的 snake_case。
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CategorySchema(BaseModel):
    """分类 schema 基类"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,      # 同时接受别名和字段名
        from_attributes=True,       # 支持从 ORM 对象创建
        extra='ignore',
    )

    def to_dict(self) -> Dict[str, Any]:
        """按接口约定输出（camelCase）"""
        return self.model_dump(by_alias=True)


class CategoryRecord(CategorySchema):
    """扁平分类记录

    parent_id 是对另一条记录 id 的弱引用，可能为空（根分类），
    也可能指向不存在的记录（孤儿）。
    """
    id: str = Field(description="分类ID")
    name: str = Field(description="分类名称")
    slug: str = Field(default="", description="slug")
    parent_id: Optional[str] = Field(default=None, description="父分类ID，根分类为空")
    url_path: str = Field(default="", description="从根开始以 / 拼接的完整路径")
    path: Optional[str] = Field(default=None, description="数据库中存储的原始路径")
    sort: int = Field(default=0, description="同级排序值")
    is_active: bool = Field(default=True, description="是否启用")
    direct_product_count: int = Field(default=0, description="直属商品数")
    total_product_count: int = Field(default=0, description="商品总数（含所有子孙分类）")
    icon: Optional[str] = Field(default=None, description="图标，仅一级分类有效")

    @field_validator("id", "parent_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        # 整数主键统一转为字符串，空字符串视为无父分类
        if value is None or value == "":
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _default_url_path(self):
        if not self.url_path and self.path:
            self.url_path = self.path
        return self

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


class CategoryNode(CategorySchema):
    """分类树节点

    children 由节点独占，节点不保存父节点引用，祖先关系只在遍历时可知。
    """
    id: str
    name: str
    slug: str = ""
    url_path: str = ""
    sort: int = 0
    is_active: bool = True
    direct_product_count: int = 0
    total_product_count: int = 0
    icon: Optional[str] = None
    children: List["CategoryNode"] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: CategoryRecord) -> "CategoryNode":
        return cls(
            id=record.id,
            name=record.name,
            slug=record.slug,
            url_path=record.url_path,
            sort=record.sort,
            is_active=record.is_active,
            direct_product_count=record.direct_product_count,
            total_product_count=record.total_product_count,
            icon=record.icon if record.parent_id is None else None,
        )

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def with_children(self, children: List["CategoryNode"], **changes: Any) -> "CategoryNode":
        """返回替换了 children（及其他字段）的新节点，原节点不变"""
        return self.model_copy(update={"children": children, **changes})


class FlatCategory(CategorySchema):
    """展平后的分类项，用于带缩进的父分类下拉框"""
    id: str
    name: str
    path: str = ""
    depth: int = 0
    has_children: bool = False


class MatchSpan(CategorySchema):
    """名称中匹配到的子串区间"""
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


class ParentAssignment(CategorySchema):
    """父分类校验请求"""
    category_id: str = Field(description="正在编辑的分类ID")
    parent_id: Optional[str] = Field(default=None, description="新的父分类ID，为空表示移动到根")

    @field_validator("category_id", "parent_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        if value is None or value == "":
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
