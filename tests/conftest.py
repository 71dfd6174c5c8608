"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- 临时目录/文件
- 示例分类数据
- 测试客户端
"""

import os
import tempfile

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


# ==================== 基础 Fixtures ====================

@pytest.fixture(scope="session")
def temp_dir():
    """创建临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def temp_file(temp_dir):
    """创建临时文件的工厂函数"""
    created_files = []

    def _create_file(filename: str, content: str = "") -> str:
        filepath = os.path.join(temp_dir, filename)
        if os.path.dirname(filepath):
            os.makedirs(os.path.dirname(filepath), exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)
        created_files.append(filepath)
        return filepath

    yield _create_file

    # 清理
    for f in created_files:
        if os.path.exists(f):
            os.remove(f)


# ==================== 分类数据 Fixtures ====================

@pytest.fixture
def simple_raw_records():
    """最小示例：一个父子关系 + 一个孤儿"""
    return [
        {"id": "A", "parentId": None, "name": "Shoes", "urlPath": "shoes"},
        {"id": "B", "parentId": "A", "name": "Boots", "urlPath": "shoes/boots"},
        {"id": "C", "parentId": "Z", "name": "Orphan", "urlPath": "orphan"},
    ]


@pytest.fixture
def simple_records(simple_raw_records):
    from ycatalog.category import parse_category_records
    return parse_category_records(simple_raw_records)


@pytest.fixture
def catalog_raw_records():
    """三层分类树

    Clothing (c1, 停用)
      └─ Jackets (c2)
    Shoes (s1)
      ├─ Boots (s2)
      │    └─ Winter Boots (s4)
      └─ sandals (s3)
    """
    return [
        {"id": "s2", "parentId": "s1", "name": "Boots", "urlPath": "shoes/boots",
         "sort": 2, "directProductCount": 1},
        {"id": "c1", "parentId": None, "name": "Clothing", "urlPath": "clothing",
         "sort": 2, "isActive": False, "icon": "shirt"},
        {"id": "s1", "parentId": None, "name": "Shoes", "urlPath": "shoes",
         "sort": 1, "icon": "shoe", "directProductCount": 2},
        {"id": "s4", "parentId": "s2", "name": "Winter Boots", "urlPath": "shoes/boots/winter",
         "sort": 0, "directProductCount": 3},
        {"id": "s3", "parentId": "s1", "name": "sandals", "urlPath": "shoes/sandals",
         "sort": 1},
        {"id": "c2", "parentId": "c1", "name": "Jackets", "urlPath": "clothing/jackets",
         "icon": "ignored"},
    ]


@pytest.fixture
def catalog_records(catalog_raw_records):
    from ycatalog.category import parse_category_records
    return parse_category_records(catalog_raw_records)


@pytest.fixture
def catalog_tree(catalog_records):
    from ycatalog.category import build_category_tree
    return build_category_tree(catalog_records)


# ==================== FastAPI Fixtures ====================

@pytest.fixture
def category_service(catalog_raw_records):
    """已加载示例数据的分类树服务"""
    from ycatalog.category import CategoryTreeService
    service = CategoryTreeService()
    service.load(catalog_raw_records)
    return service


@pytest.fixture
def app(category_service):
    """挂载分类树路由的测试应用"""
    from ycatalog.category import create_category_tree_router
    from ycatalog.exceptions import register_exception_handlers

    test_app = FastAPI(title="Test App")
    register_exception_handlers(test_app)
    test_app.include_router(create_category_tree_router(category_service), prefix="/category")
    return test_app


@pytest.fixture
def client(app):
    """创建测试客户端"""
    return TestClient(app)
