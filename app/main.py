from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import cart, dashboard, orders, products, ranking, stock
from app.core.config import get_settings
from app.core.exceptions import PersistenceException
from app.core.logging import setup_logging
from app.db.database import init_db

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(get_settings())
    init_db()
    logger.info("Application started")
    yield


app = FastAPI(
    title="Sales Reservation API",
    description="Redis 기반 재고 선점 및 주문 수명주기 관리 시스템",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(stock.router, prefix="/api/stock", tags=["stock"])
app.include_router(cart.router, prefix="/api/cart", tags=["cart"])
app.include_router(orders.router, prefix="/api/orders", tags=["orders"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
app.include_router(ranking.router, prefix="/api/ranking", tags=["ranking"])


@app.exception_handler(PersistenceException)
async def persistence_exception_handler(request: Request, exc: PersistenceException):
    """저장소 장애는 503으로 응답합니다."""
    logger.error("Persistence failure", path=request.url.path, error=exc.message)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message},
    )


@app.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "message": "Sales Reservation API",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """헬스체크 엔드포인트 (Docker 헬스체크용)"""
    return {"status": "healthy"}
