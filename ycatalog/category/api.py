"""分类树模块 - 只读 API

使用动词风格路由，只使用 GET 和 POST 请求。
分类的增删改由业务系统负责，这里只提供树形视图、父分类候选和保存前校验。

使用示例:
    from fastapi import FastAPI
    from ycatalog.category import CategoryTreeService, create_category_tree_router
    from ycatalog.exceptions import register_exception_handlers

    service = CategoryTreeService()
    service.load(records)

    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(create_category_tree_router(service), prefix="/api/category")

    # 生成的路由:
    # GET  /api/category/tree, /flat, /parent-options, /get, /breadcrumb, /by-path, /expansion
    # POST /api/category/validate-parent
"""

from typing import List, Optional

from fastapi import APIRouter, Query

from ycatalog.log import api_logger
from ycatalog.response import ItemResponse, Resp
from .schemas import ParentAssignment
from .service import CategoryTreeService
from .tree_filter import filter_category_tree


def create_category_tree_router(
    service: CategoryTreeService,
    prefix: str = "",
    tags: Optional[List[str]] = None,
    dependencies: Optional[List] = None,
) -> APIRouter:
    """创建分类树路由

    Args:
        service: 已加载数据的分类树服务
        prefix: 路由前缀
        tags: OpenAPI 标签
        dependencies: 路由依赖（如权限检查）

    Returns:
        APIRouter

    生成的路由:
        GET  /tree            - 分类树（支持搜索、前台视图）
        GET  /flat            - 带层级的平铺列表
        GET  /parent-options  - 父分类下拉框选项
        GET  /get             - 分类详情
        GET  /breadcrumb      - 面包屑
        GET  /by-path         - 按 URL 路径查找分类
        GET  /expansion       - 节点展开状态
        POST /validate-parent - 保存前校验父分类
    """
    router = APIRouter(prefix=prefix, tags=tags or ["分类树"], dependencies=dependencies or [])

    @router.get(
        "/tree",
        response_model=ItemResponse[list],
        summary="获取分类树",
        description="按名称或路径搜索时保留匹配节点的完整祖先链"
    )
    async def get_category_tree(
        search: Optional[str] = Query(None, description="搜索词"),
        storefront: bool = Query(False, description="是否返回前台视图（过滤停用、裁剪空分支）"),
    ):
        """获取分类树"""
        forest = service.storefront_tree() if storefront else service.tree
        if search:
            forest = filter_category_tree(forest, search)
        return Resp.OK(data=forest)

    @router.get(
        "/flat",
        response_model=ItemResponse[list],
        summary="获取平铺分类列表",
        description="先序遍历输出，exclude_id 对应的分类及其子树不输出"
    )
    async def get_flat_categories(
        exclude_id: Optional[str] = Query(None, description="排除的分类ID"),
    ):
        """获取平铺分类列表"""
        return Resp.OK(data=service.flat_options(exclude_id=exclude_id))

    @router.get(
        "/parent-options",
        response_model=ItemResponse[list],
        summary="获取父分类候选",
        description="编辑分类时的父分类下拉框，始终排除分类自身"
    )
    async def get_parent_options(
        editing_id: Optional[str] = Query(None, description="正在编辑的分类ID，新建时不传"),
        exclude_descendants: Optional[bool] = Query(None, description="是否排除子孙分类，不传时使用配置"),
    ):
        """获取父分类候选"""
        return Resp.OK(data=service.parent_options(editing_id, exclude_descendants))

    @router.get(
        "/get",
        response_model=ItemResponse[dict],
        summary="获取分类详情",
    )
    async def get_category(
        category_id: str = Query(..., description="分类ID"),
    ):
        """获取分类详情"""
        record = service.get(category_id)
        if not record:
            return Resp.NotFound(message=f"分类不存在: {category_id}")
        return Resp.OK(data=record)

    @router.get(
        "/breadcrumb",
        response_model=ItemResponse[list],
        summary="获取分类面包屑",
        description="从根分类到当前分类"
    )
    async def get_breadcrumb(
        category_id: str = Query(..., description="分类ID"),
    ):
        """获取分类面包屑"""
        crumbs = service.breadcrumb(category_id)
        if not crumbs:
            return Resp.NotFound(message=f"分类不存在: {category_id}")
        return Resp.OK(data=crumbs)

    @router.get(
        "/by-path",
        response_model=ItemResponse[dict],
        summary="按路径查找分类",
    )
    async def get_category_by_path(
        path: str = Query(..., description="分类 URL 路径，如 shoes/boots"),
    ):
        """按路径查找分类"""
        record = service.find_by_path(path)
        if not record:
            return Resp.NotFound(message=f"分类不存在: {path}")
        return Resp.OK(data=record)

    @router.get(
        "/expansion",
        response_model=ItemResponse[dict],
        summary="获取节点展开状态",
    )
    async def get_expansion(
        search: Optional[str] = Query(None, description="搜索词"),
        selected_id: Optional[str] = Query(None, description="选中的分类ID，不传时使用当前选中"),
    ):
        """获取节点展开状态"""
        if selected_id is not None and selected_id not in service.index:
            return Resp.NotFound(message=f"分类不存在: {selected_id}")
        return Resp.OK(data=service.expansion(search or "", selected_id))

    @router.post(
        "/validate-parent",
        response_model=ItemResponse[dict],
        summary="校验父分类",
        description="父分类为自身或子孙分类时返回 422"
    )
    async def validate_parent(data: ParentAssignment):
        """校验父分类"""
        if data.category_id not in service.index:
            return Resp.NotFound(message=f"分类不存在: {data.category_id}")
        service.validate_parent(data.category_id, data.parent_id)
        api_logger.debug(f"Parent assignment accepted: {data.category_id} -> {data.parent_id}")
        return Resp.OK(data=data, message="校验通过")

    return router

