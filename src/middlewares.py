import logging
import time

from fastapi import Request

logger = logging.getLogger(__name__)


def log_request(method: str, path: str, status_code: int, elapsed_ms: float) -> None:
    """Simple request logging"""
    logger.info(f"{method} {path} -> {status_code} ({elapsed_ms:.1f} ms)")


def log_error(error: str, method: str, path: str) -> None:
    """Simple error logging"""
    logger.error(f"Error in {method} {path}: {error}")


async def logging_middleware(request: Request, call_next):
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        log_error(str(e), request.method, request.url.path)
        raise
    log_request(request.method, request.url.path, response.status_code, (time.perf_counter() - start) * 1000)
    return response
