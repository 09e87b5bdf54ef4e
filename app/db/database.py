"""
SQLAlchemy 데이터베이스 설정

상품/주문의 영구 저장소로 사용하는 SQLAlchemy 엔진, 세션, Base 클래스를 정의합니다.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.core.config import get_settings

settings = get_settings()

# SQLite 사용 시 check_same_thread 비활성화
engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False}
    if settings.database_url.startswith("sqlite")
    else {},
    pool_pre_ping=True,  # connection 유효성 자동 체크
    pool_recycle=3600,  # 1시간마다 connection 재생성
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db() -> None:
    """모든 테이블을 생성합니다 (이미 존재하면 건너뜀)."""
    # 모델 모듈을 import해야 Base.metadata에 테이블이 등록됨
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """
    FastAPI 의존성 주입용 데이터베이스 세션 제너레이터

    사용 예:
        @app.get("/orders/{order_id}")
        def read_order(order_id: str, db: Session = Depends(get_db)):
            return db.get(Order, order_id)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
