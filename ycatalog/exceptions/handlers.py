"""全局异常处理器

提供 FastAPI 全局异常处理器，自动将异常转换为统一的 JSON 响应格式。
"""

import os
import sys
import traceback
from typing import Dict, List, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ycatalog.log import get_logger
from ycatalog.response import ResponseStatus, ValidationErrorResponse
from .exceptions import BusinessException

logger = get_logger()


# 框架内置错误消息（Pydantic v2 错误类型 -> 中文）
_BUILTIN_MESSAGES: Dict[str, str] = {
    "missing": "此字段为必填项",
    "int_type": "必须是整数",
    "int_parsing": "必须是整数",
    "bool_type": "必须是布尔值",
    "bool_parsing": "必须是布尔值",
    "string_type": "必须是字符串",
    "list_type": "必须是列表",
    "dict_type": "必须是对象",
    "model_type": "必须是对象",
    "literal_error": "取值不在允许范围内",
    "greater_than_equal": "数值过小",
    "less_than_equal": "数值过大",
}

# 回退翻译（英文短语 -> 中文）
_FALLBACK_TRANSLATIONS: Dict[str, str] = {
    "Field required": "此字段为必填项",
    "Input should be": "输入值应该是",
    "Value error,": "值错误:",
    "Invalid": "无效的",
}


def translate_error(error_type: str, original_msg: str) -> str:
    """将单条 Pydantic 错误翻译为中文消息"""
    if error_type in _BUILTIN_MESSAGES:
        return _BUILTIN_MESSAGES[error_type]
    msg = original_msg
    for en, zh in _FALLBACK_TRANSLATIONS.items():
        msg = msg.replace(en, zh)
    return msg


def format_validation_errors(errors: List[dict], skip_locs: tuple = ("body", "query", "path", "header", "cookie")) -> List[str]:
    """将 Pydantic errors() 转换为 "字段: 消息" 列表

    同时用于请求参数校验和分类记录解析（parse_category_records）。
    """
    messages = []
    for error in errors:
        loc_parts = [str(loc) for loc in error.get("loc", ()) if loc not in skip_locs]
        field = ".".join(loc_parts) if loc_parts else "请求体"
        messages.append(f"{field}: {translate_error(error.get('type', ''), error.get('msg', ''))}")
    return messages


async def business_exception_handler(
    request: Request,
    exc: BusinessException
) -> JSONResponse:
    """业务异常处理器

    处理所有继承自 BusinessException 的异常，转换为统一的 JSON 响应。
    """
    request_id = getattr(request.state, "request_id", "unknown")

    logger.warning(
        f"Business exception occurred: {exc.code} - {exc.message}",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "error_code": exc.code,
            "status_code": exc.status_code,
            "details": exc.details,
        }
    )

    content = {
        "status": ResponseStatus.ERROR.value,
        "message": exc.message,
        "msg_details": exc.details,
        "data": {}
    }

    if exc.code:
        content["error_code"] = exc.code

    # 调试模式下附带额外上下文
    is_debug = os.getenv("DEBUG", "false").lower() == "true"
    if is_debug and exc.extra:
        content["debug_info"] = exc.extra

    return JSONResponse(
        status_code=exc.status_code,
        content=content
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """请求参数验证异常处理器，转换为友好的中文错误消息"""
    request_id = getattr(request.state, "request_id", "unknown")
    errors = format_validation_errors(exc.errors())

    logger.warning(
        f"Validation error: {len(errors)} field(s) failed validation",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
            "errors": errors
        }
    )

    return JSONResponse(
        status_code=422,
        content={
            "status": ResponseStatus.ERROR.value,
            "message": "请求参数验证失败",
            "msg_details": errors,
            "data": {},
            "error_code": "VALIDATION_ERROR"
        }
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """HTTP 异常处理器"""
    log_level = "warning" if exc.status_code < 500 else "error"
    getattr(logger, log_level)(
        f"HTTP exception: {exc.status_code} - {exc.detail}",
        extra={"path": request.url.path, "method": request.method}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": ResponseStatus.ERROR.value,
            "message": str(exc.detail),
            "msg_details": [],
            "data": {},
            "error_code": f"HTTP_{exc.status_code}"
        }
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """通用异常处理器

    捕获所有未被其他处理器处理的异常，记录完整堆栈信息。
    """
    exc_type, exc_value, exc_traceback = sys.exc_info()
    tb_lines = traceback.format_exception(exc_type, exc_value, exc_traceback)

    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "traceback": "".join(tb_lines)
        }
    )

    content = {
        "status": ResponseStatus.ERROR.value,
        "message": "服务器内部错误",
        "msg_details": [],
        "data": {},
        "error_code": "INTERNAL_SERVER_ERROR"
    }

    if os.getenv("DEBUG", "false").lower() == "true":
        content["msg_details"] = [
            f"异常类型: {type(exc).__name__}",
            f"异常消息: {str(exc)}"
        ]

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content
    )


def register_exception_handlers(app) -> None:
    """注册所有异常处理器到 FastAPI 应用

    使用示例:
        from fastapi import FastAPI
        from ycatalog.exceptions import register_exception_handlers

        app = FastAPI()
        register_exception_handlers(app)
    """
    app.add_exception_handler(BusinessException, business_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    # 通用异常处理器（必须放在最后）
    app.add_exception_handler(Exception, general_exception_handler)

    # 覆盖 OpenAPI 默认的 422 响应 Schema，与实际验证错误处理器一致
    app.router.responses[422] = {
        "description": "请求参数验证失败",
        "model": ValidationErrorResponse,
    }

    logger.info("Exception handlers registered successfully")
