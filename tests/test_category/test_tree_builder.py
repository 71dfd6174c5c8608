"""分类树构建测试

测试扁平记录到森林的构建、排序、孤儿与环的处理
"""

import logging

import pytest

from ycatalog.category import (
    CategoryNode,
    CategoryRecord,
    build_category_tree,
    build_tree_from_raw,
    calculate_tree_depth,
    collation_key,
    count_nodes,
    filter_active,
    filter_category_tree,
    find_node,
    flatten_category_tree,
    get_node_path,
    get_sort_key,
    leaf_categories,
    parse_category_records,
    prune_empty_branches,
    roll_up_product_counts,
)
from ycatalog.exceptions import ErrorCode, ValidationException


def ids(nodes):
    return [node.id for node in nodes]


class TestParseCategoryRecords:
    """记录解析测试"""

    def test_parse_camel_case(self, simple_raw_records):
        """测试解析接口返回的 camelCase 字段"""
        records = parse_category_records(simple_raw_records)

        assert [r.id for r in records] == ["A", "B", "C"]
        assert records[1].parent_id == "A"
        assert records[1].url_path == "shoes/boots"
        assert records[0].is_root

    def test_parse_snake_case(self):
        """测试同时支持 snake_case 字段"""
        records = parse_category_records([
            {"id": "A", "parent_id": None, "name": "Shoes", "url_path": "shoes"},
        ])
        assert records[0].url_path == "shoes"

    def test_int_ids_coerced_to_str(self):
        """测试整数主键转为字符串"""
        records = parse_category_records([
            {"id": 1, "parentId": None, "name": "Root"},
            {"id": 2, "parentId": 1, "name": "Child"},
        ])
        assert records[0].id == "1"
        assert records[1].parent_id == "1"

    def test_empty_parent_id_is_root(self):
        """测试空字符串父分类视为根分类"""
        records = parse_category_records([{"id": "A", "parentId": "", "name": "Root"}])
        assert records[0].parent_id is None

    def test_url_path_defaults_to_path(self):
        """测试 urlPath 为空时使用 path"""
        records = parse_category_records([{"id": "A", "name": "Root", "path": "/root"}])
        assert records[0].url_path == "/root"

    def test_records_returned_as_is(self, simple_records):
        """测试已经是 CategoryRecord 时直接返回"""
        assert parse_category_records(simple_records) == simple_records

    def test_from_attributes(self):
        """测试从带属性的对象解析"""
        class Row:
            def __init__(self, id, name, parent_id=None):
                self.id = id
                self.name = name
                self.parent_id = parent_id

        records = parse_category_records([Row("A", "Shoes"), Row("B", "Boots", "A")])
        assert records[1].parent_id == "A"

    def test_missing_fields_raise(self):
        """测试缺少必填字段时抛出 ValidationException"""
        with pytest.raises(ValidationException) as exc_info:
            parse_category_records([{"id": "A"}, {"name": "No id"}])

        exc = exc_info.value
        assert exc.code == ErrorCode.INVALID_CATEGORY_RECORD
        assert exc.status_code == 422
        assert "0.name: 此字段为必填项" in exc.details
        assert "1.id: 此字段为必填项" in exc.details

    def test_empty_input(self):
        assert parse_category_records([]) == []


class TestBuildCategoryTree:
    """建树测试"""

    def test_parent_child_and_orphan(self, simple_records):
        """测试父子关系与孤儿节点"""
        tree = build_category_tree(simple_records)

        assert ids(tree) == ["C", "A"] or ids(tree) == ["A", "C"]
        shoes = next(node for node in tree if node.id == "A")
        assert ids(shoes.children) == ["B"]
        orphan = next(node for node in tree if node.id == "C")
        assert orphan.children == []

    def test_roots_sorted_by_name(self, simple_records):
        """测试根节点按名称排序（Orphan 在 Shoes 之前）"""
        tree = build_category_tree(simple_records)
        assert [node.name for node in tree] == ["Orphan", "Shoes"]

    def test_sort_by_name_case_insensitive(self, catalog_tree):
        """测试名称排序忽略大小写"""
        assert ids(catalog_tree) == ["c1", "s1"]
        shoes = catalog_tree[1]
        assert [n.name for n in shoes.children] == ["Boots", "sandals"]

    def test_sort_by_sort_field(self, catalog_records):
        """测试按 sort 字段排序"""
        tree = build_category_tree(catalog_records, sort_by="sort")

        assert ids(tree) == ["s1", "c1"]
        assert ids(tree[0].children) == ["s3", "s2"]

    def test_sort_ties_broken_by_id(self):
        """测试同名节点按 ID 排序，结果稳定"""
        records = parse_category_records([
            {"id": "2", "name": "Same"},
            {"id": "1", "name": "Same"},
        ])
        assert ids(build_category_tree(records)) == ["1", "2"]

    def test_invalid_sort_by(self, simple_records):
        """测试不支持的排序方式"""
        with pytest.raises(ValidationException) as exc_info:
            build_category_tree(simple_records, sort_by="created_at")
        assert exc_info.value.code == ErrorCode.INVALID_PARAMETER

    def test_get_sort_key_invalid_even_for_empty_input(self):
        with pytest.raises(ValidationException):
            build_category_tree([], sort_by="bogus")

    def test_empty_input(self):
        assert build_category_tree([]) == []

    def test_node_conservation(self, catalog_records):
        """测试节点总数等于记录数"""
        tree = build_category_tree(catalog_records)
        assert count_nodes(tree) == len(catalog_records)

    def test_self_reference_becomes_root(self):
        """测试父分类指向自身时作为根节点"""
        records = parse_category_records([{"id": "A", "parentId": "A", "name": "Loop"}])
        tree = build_category_tree(records)

        assert ids(tree) == ["A"]
        assert tree[0].children == []

    def test_cycle_promoted_to_root(self, caplog):
        """测试环上的节点被提升为根节点，并记录警告"""
        records = parse_category_records([
            {"id": "R", "parentId": None, "name": "Root"},
            {"id": "X", "parentId": "Y", "name": "X"},
            {"id": "Y", "parentId": "X", "name": "Y"},
        ])

        with caplog.at_level(logging.WARNING, logger="ycatalog"):
            tree = build_category_tree(records)

        assert count_nodes(tree) == 3
        assert ids(tree) == ["R", "X"]
        assert ids(tree[1].children) == ["Y"]
        assert "promoted to root" in caplog.text

    def test_icon_only_on_root(self, catalog_tree):
        """测试图标只保留在一级分类"""
        clothing = catalog_tree[0]
        assert clothing.icon == "shirt"
        assert clothing.children[0].icon is None

    def test_duplicate_ids_keep_first_as_parent(self):
        """测试 ID 重复时，子节点挂到第一条记录上"""
        records = parse_category_records([
            {"id": "A", "name": "First"},
            {"id": "A", "name": "Second"},
            {"id": "B", "parentId": "A", "name": "Child"},
        ])
        tree = build_category_tree(records)

        assert count_nodes(tree) == 3
        first = next(node for node in tree if node.name == "First")
        assert ids(first.children) == ["B"]

    def test_rebuild_creates_new_nodes(self, simple_records):
        """测试每次建树都生成全新节点"""
        tree1 = build_category_tree(simple_records)
        tree2 = build_category_tree(simple_records)
        assert tree1[0] is not tree2[0]
        assert tree1 == tree2

    def test_build_from_raw(self, simple_raw_records):
        tree = build_tree_from_raw(simple_raw_records)
        assert isinstance(tree[0], CategoryNode)
        assert count_nodes(tree) == 3


class TestGetSortKey:
    """排序函数测试"""

    def test_name_key(self):
        key = get_sort_key("name")
        node = CategoryNode(id="1", name="Boots")
        assert key(node) == ("boots", "boots", "Boots", "1")

    def test_sort_key(self):
        key = get_sort_key("sort")
        node = CategoryNode(id="1", name="Boots", sort=3)
        assert key(node) == (3, "boots", "boots", "Boots", "1")

    def test_collation_key_strips_marks(self):
        assert collation_key("Écharpes") == "echarpes"
        assert collation_key("Ёлка") == "елка"
        assert collation_key("Straße") == "strasse"


class TestLocaleOrdering:
    """带附加符号的名称排序测试"""

    def test_cyrillic_yo_sorts_with_ye(self):
        """测试 Ё 与 Е 同序，排在 Ж 之前"""
        records = parse_category_records([
            {"id": "1", "name": "Жакеты"},
            {"id": "2", "name": "Ёлочные украшения"},
            {"id": "3", "name": "Ещё"},
        ])
        tree = build_category_tree(records)
        assert [node.name for node in tree] == ["Ёлочные украшения", "Ещё", "Жакеты"]

    def test_accented_latin_before_z(self):
        """测试 É 按 E 排序，排在 Z 之前"""
        records = parse_category_records([
            {"id": "1", "name": "Zapatos"},
            {"id": "2", "name": "Écharpes"},
        ])
        tree = build_category_tree(records)
        assert [node.name for node in tree] == ["Écharpes", "Zapatos"]

    def test_sort_mode_uses_same_name_order(self):
        """测试 sort 相同时按名称排序"""
        records = parse_category_records([
            {"id": "1", "name": "Жакеты", "sort": 1},
            {"id": "2", "name": "Ещё", "sort": 1},
            {"id": "3", "name": "Аксессуары", "sort": 2},
        ])
        tree = build_category_tree(records, sort_by="sort")
        assert ids(tree) == ["2", "1", "3"]

    def test_marked_and_plain_names_stable(self):
        """测试只差附加符号的名称顺序稳定"""
        records = parse_category_records([
            {"id": "1", "name": "Ёлка"},
            {"id": "2", "name": "Елка"},
        ])
        assert ids(build_category_tree(records)) == ["2", "1"]
        assert ids(build_category_tree(list(reversed(records)))) == ["2", "1"]


def _chain_records(depth):
    """生成一条 depth 层的单链分类"""
    return parse_category_records([
        {
            "id": f"n{i}",
            "parentId": f"n{i - 1}" if i else None,
            "name": f"level-{i:04d}",
            "urlPath": f"level-{i:04d}",
        }
        for i in range(depth)
    ])


class TestDeepHierarchy:
    """深层级分类测试"""

    DEPTH = 1500

    def test_build_and_flatten(self):
        """测试超过默认递归深度的单链可以建树和展平"""
        records = _chain_records(self.DEPTH)
        tree = build_category_tree(records)
        flat = flatten_category_tree(tree)

        assert len(flat) == len(records)
        assert count_nodes(tree) == self.DEPTH
        assert flat[-1].depth == self.DEPTH - 1
        assert flat[-1].id == f"n{self.DEPTH - 1}"

    def test_search_keeps_whole_chain(self):
        """测试搜索最深节点时保留整条祖先链"""
        tree = build_category_tree(_chain_records(self.DEPTH))
        filtered = filter_category_tree(tree, f"level-{self.DEPTH - 1:04d}")

        assert count_nodes(filtered) == self.DEPTH
        assert calculate_tree_depth(filtered) == self.DEPTH

    def test_sort_mode(self):
        tree = build_category_tree(_chain_records(self.DEPTH), sort_by="sort")
        assert count_nodes(tree) == self.DEPTH

    def test_node_path_and_aggregation(self):
        """测试路径查找、商品数汇总和过滤在深层级下正常工作"""
        tree = build_category_tree(_chain_records(self.DEPTH))
        deepest = f"n{self.DEPTH - 1}"

        path = get_node_path(tree, deepest)
        assert len(path) == self.DEPTH
        assert path[0].id == "n0"
        assert find_node(tree, deepest).name == f"level-{self.DEPTH - 1:04d}"

        rolled = roll_up_product_counts(tree, {deepest: 2})
        assert rolled[0].total_product_count == 2
        assert count_nodes(prune_empty_branches(rolled)) == self.DEPTH
        assert count_nodes(filter_active(rolled)) == self.DEPTH
        assert len(leaf_categories(tree)) == 1

    def test_cycle_in_deep_chain(self):
        """测试深层单链首尾成环时仍保留所有节点"""
        raw = [
            {"id": f"n{i}", "parentId": f"n{(i - 1) % self.DEPTH}", "name": f"level-{i:04d}"}
            for i in range(self.DEPTH)
        ]
        tree = build_category_tree(parse_category_records(raw))

        assert ids(tree) == ["n0"]
        assert count_nodes(tree) == self.DEPTH


class TestCategoryNode:
    """节点模型测试"""

    def test_from_record(self):
        record = CategoryRecord(id="A", name="Shoes", url_path="shoes", icon="shoe")
        node = CategoryNode.from_record(record)

        assert node.id == "A"
        assert node.url_path == "shoes"
        assert node.icon == "shoe"
        assert node.children == []
        assert not node.has_children

    def test_with_children_does_not_mutate(self):
        child = CategoryNode(id="B", name="Boots")
        node = CategoryNode(id="A", name="Shoes", children=[child])

        copied = node.with_children([], total_product_count=5)

        assert copied.children == []
        assert copied.total_product_count == 5
        assert node.children == [child]
        assert node.total_product_count == 0

    def test_to_dict_uses_camel_case(self):
        node = CategoryNode(id="A", name="Shoes", url_path="shoes",
                            children=[CategoryNode(id="B", name="Boots")])
        data = node.to_dict()

        assert data["urlPath"] == "shoes"
        assert data["children"][0]["id"] == "B"
        assert "totalProductCount" in data
