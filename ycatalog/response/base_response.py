from datetime import datetime
from enum import Enum
from typing import Any, Optional, List, TypeVar, Generic

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


# 泛型类型变量
T = TypeVar('T')


class ResponseStatus(str, Enum):
    """响应状态枚举

    用于标识响应的业务状态，与 HTTP 状态码独立。
    """
    SUCCESS = "success"   # 请求成功
    ERROR = "error"       # 请求失败（客户端或服务端错误）


# ========== 泛型响应模型 ==========

class ItemResponse(BaseModel, Generic[T]):
    """泛型单项响应模型

    使用示例:
        @router.get("/tree", response_model=ItemResponse[List[dict]])
        def get_tree():
            ...
    """
    status: str = Field(default="success", description="响应状态")
    message: str = Field(default="请求成功", description="响应消息")
    msg_details: List[str] = Field(default=[], description="详细信息")
    data: T = Field(description="数据")


class ValidationErrorResponse(BaseModel):
    """验证错误响应模型（422）

    描述参数校验失败时的实际响应格式，用于覆盖 FastAPI 默认的 422 OpenAPI Schema。
    """
    status: str = Field(default="error", description="响应状态")
    message: str = Field(default="请求参数验证失败", description="错误消息")
    msg_details: List[str] = Field(default=[], description="各字段验证错误详情")
    data: dict = Field(default={}, description="空数据")
    error_code: str = Field(default="VALIDATION_ERROR", description="错误码")


class BaseResponse:
    """基础响应类"""

    @staticmethod
    def _serialize_data(data: Any, _is_top_level: bool = True) -> Any:
        """递归序列化数据，处理带 to_dict 的对象、列表和字典

        Args:
            data: 要序列化的数据
            _is_top_level: 是否为顶层调用，顶层 None 转为 {}，嵌套 None 保持为 None
        """
        if data is None:
            return {} if _is_top_level else None

        if isinstance(data, datetime):
            return data.strftime('%Y-%m-%d %H:%M:%S')

        # 分类节点、记录等 schema 对象，调用 to_dict 后继续递归处理
        if hasattr(data, 'to_dict') and callable(getattr(data, 'to_dict')):
            return BaseResponse._serialize_data(data.to_dict(), False)

        if isinstance(data, (list, tuple)):
            return [BaseResponse._serialize_data(item, False) for item in data]

        if isinstance(data, dict):
            return {k: BaseResponse._serialize_data(v, False) for k, v in data.items()}

        return data

    @staticmethod
    def _create_response(
        message: str,
        data: Any = None,
        msg_details: Optional[List[str]] = None,
        status_code: int = status.HTTP_200_OK,
        response_status: ResponseStatus = ResponseStatus.SUCCESS
    ) -> JSONResponse:
        """创建标准化响应"""
        content = {
            "status": response_status.value,
            "message": message,
            "msg_details": msg_details if msg_details is not None else [],
            "data": BaseResponse._serialize_data(data)
        }

        return JSONResponse(
            status_code=status_code,
            content=content
        )


def OK(data: Any = None, message: str = "请求成功") -> JSONResponse:
    """200 OK - 请求成功"""
    return BaseResponse._create_response(
        data=data,
        message=message,
        status_code=status.HTTP_200_OK,
        response_status=ResponseStatus.SUCCESS
    )


def NotFound(message: str = "资源不存在", msg_details: Optional[List[str]] = None) -> JSONResponse:
    """404 Not Found - 资源不存在"""
    return BaseResponse._create_response(
        message=message,
        msg_details=msg_details,
        status_code=status.HTTP_404_NOT_FOUND,
        response_status=ResponseStatus.ERROR
    )


# ==================== 响应快捷类（推荐） ====================

class Resp:
    """响应快捷类

    使用示例:
        from ycatalog.response import Resp

        return Resp.OK(data=tree)
        return Resp.NotFound(message="分类不存在")
    """

    OK = staticmethod(OK)
    NotFound = staticmethod(NotFound)
