"""FastAPI 앱 팩토리"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from src.core.config import settings
from src.core.logging import logger
from src.api import health_router, resolve_router, prefetch_router
from src.engine.deferred import get_deferred_writer
from src.services.impl.http_client import shutdown_shared_http_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기"""
    logger.info("Starting application...")
    if not settings.searchapi_key:
        logger.warning("SEARCHAPI_KEY is not set; live searches will fail")
    logger.info("Application started")
    yield
    logger.info("Shutting down application...")

    # 응답 후 남은 캐시 쓰기를 먼저 마무리
    cancelled = await get_deferred_writer().drain(timeout=settings.deferred_drain_timeout_s)
    if cancelled:
        logger.warning(f"{cancelled} background cache writes did not finish before shutdown")

    await shutdown_shared_http_client()


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 스키마 검증 실패 → INVALID_PARAMS (400)"""
    errors = exc.errors()
    fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in errors]
    logger.warning(f"[API] Request validation failed: {request.url.path} fields={fields}")
    return JSONResponse(
        status_code=400,
        content={
            "status": "error",
            "data": None,
            "message": f"입력 검증 실패: {', '.join(f for f in fields if f) or 'body'}",
            "error_code": "INVALID_PARAMS",
        },
    )


def create_app() -> FastAPI:
    """
    FastAPI 앱 생성 (Factory Pattern)

    Returns:
        FastAPI 앱 인스턴스
    """
    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # 라우터 등록
    app.include_router(health_router)
    app.include_router(resolve_router)
    app.include_router(prefetch_router)

    return app

# 앱 인스턴스 생성 (uvicorn이 로드할 수 있도록)
app = create_app()
