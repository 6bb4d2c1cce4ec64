"""
统一异常处理器。

挂到 DRF 的 EXCEPTION_HANDLER setting 上。
所有响应（无论成功还是失败）前端都能用同一套逻辑判断：
  response.type === 'error' / 'validation_error' / 'block' / 'warning'  → 出问题了
  没有 type 字段  → 成功

统一错误响应格式：
{
    "type":    "validation_error" | "block" | "warning" | "error",
    "code":    "VALIDATION_ERROR",
    "message": "Request validation failed.",
    "detail":  { ... }  // 可选
}
"""

from django.http import JsonResponse
from rest_framework.exceptions import ParseError, ValidationError as DRFValidationError
from rest_framework.views import exception_handler as drf_default_handler

from .exceptions import BaseAppException


def render_app_exception(exc: BaseAppException) -> JsonResponse:
    body = {
        'type': exc.type,
        'code': exc.code,
        'message': exc.message,
    }
    if exc.detail is not None:
        body['detail'] = exc.detail
    return JsonResponse(body, status=exc.http_status)


def unified_exception_handler(exc, context):
    """
    DRF exception handler entry point.

    优先级：
    1. BaseAppException 及其子类 → 统一格式
    2. ParseError（请求体不是 JSON）→ INVALID_JSON
    3. DRF 自带的 ValidationError → 转成统一格式
    4. 其他异常 → 交给 DRF 默认处理（401 / 403 / 404 / 405 ...）
    """

    # --- 1. 我们自己的异常体系 ---
    if isinstance(exc, BaseAppException):
        return render_app_exception(exc)

    # --- 2. 请求体不是合法 JSON（DRF 解析 request.data 时抛出） ---
    if isinstance(exc, ParseError):
        body = {
            'type': 'validation_error',
            'code': 'INVALID_JSON',
            'message': 'Request body is not valid JSON.',
        }
        return JsonResponse(body, status=400)

    # --- 3. DRF 自带的 ValidationError ---
    if isinstance(exc, DRFValidationError):
        body = {
            'type': 'validation_error',
            'code': 'VALIDATION_ERROR',
            'message': 'Request validation failed.',
            'detail': exc.detail,
        }
        return JsonResponse(body, status=400)

    # --- 4. 其他的交给 DRF 默认处理 ---
    return drf_default_handler(exc, context)
