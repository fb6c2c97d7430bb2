"""
Decorators for store operation logging and Lambda response formatting.
"""
import functools
import uuid
import traceback
from typing import Callable, Any, Dict
from botocore.exceptions import ClientError
from logger_config import get_logger
from utils.exceptions import RecordStoreError

logger = get_logger(__name__)


def store_operation(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator for RecordStore methods.

    Logs the operation with the bound table and main key. Errors are
    re-raised untouched; domain misses are logged at info level because
    they are ordinary outcomes for callers.
    """
    @functools.wraps(func)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        context = {
            "operation": func.__name__,
            "table": self.table_name,
            "main_key": self.main_key,
        }
        logger.debug(f"{func.__name__} started", extra=context)
        try:
            result = func(self, *args, **kwargs)
        except RecordStoreError as e:
            logger.info(
                f"{func.__name__} failed with {e.code}: {e.message}",
                extra=context
            )
            raise
        logger.debug(f"{func.__name__} finished", extra=context)
        return result

    return wrapper


def _error_response(
    error: Dict[str, Any],
    correlation_id: str,
    handler_name: str
) -> Dict[str, Any]:
    error["correlation_id"] = correlation_id
    return {
        "error": error,
        "metadata": {
            "correlation_id": correlation_id,
            "handler": handler_name
        }
    }


def lambda_handler(
    func: Callable[[Any, Any], Any]
) -> Callable[[Any, Any], Dict[str, Any]]:
    """
    Decorator for Lambda handler functions.

    Provides:
    - Request correlation IDs for logging
    - Wrapping of plain results as {"result": ...}
    - Structured error responses, carrying the store error code when
      there is one

    Args:
        func: The handler function to decorate

    Returns:
        Decorated handler function
    """
    @functools.wraps(func)
    def wrapper(event: Any, context: Any) -> Dict[str, Any]:
        correlation_id = str(uuid.uuid4())

        logger.info(
            f"Handler {func.__name__} invoked",
            extra={
                "correlation_id": correlation_id,
                "handler": func.__name__,
                "request_id": getattr(context, "aws_request_id", None) if context else None
            }
        )

        try:
            result = func(event, context)
        except ValueError as e:
            logger.warning(
                f"Handler {func.__name__} validation error: {str(e)}",
                extra={"correlation_id": correlation_id}
            )
            return _error_response(
                {"type": "ValidationError", "message": str(e)},
                correlation_id,
                func.__name__
            )
        except RecordStoreError as e:
            logger.info(
                f"Handler {func.__name__} store error {e.code}: {e.message}",
                extra={"correlation_id": correlation_id}
            )
            return _error_response(e.to_dict(), correlation_id, func.__name__)
        except ClientError as e:
            logger.error(
                f"Handler {func.__name__} DynamoDB error: {str(e)}",
                extra={"correlation_id": correlation_id}
            )
            return _error_response(
                {
                    "type": "ClientError",
                    "code": e.response.get("Error", {}).get("Code", ""),
                    "message": str(e)
                },
                correlation_id,
                func.__name__
            )
        except Exception as e:
            logger.error(
                f"Handler {func.__name__} failed: {str(e)}",
                extra={
                    "correlation_id": correlation_id,
                    "traceback": traceback.format_exc()
                },
                exc_info=True
            )
            return _error_response(
                {"type": type(e).__name__, "message": str(e)},
                correlation_id,
                func.__name__
            )

        if not isinstance(result, dict) or "result" not in result:
            result = {"result": result}
        result.setdefault("metadata", {})["correlation_id"] = correlation_id

        logger.info(
            f"Handler {func.__name__} completed successfully",
            extra={"correlation_id": correlation_id}
        )
        return result

    return wrapper
