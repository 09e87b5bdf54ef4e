"""
애플리케이션 설정 관리

Pydantic Settings를 사용하여 환경 변수를 로드합니다.
.env 파일 또는 시스템 환경 변수에서 설정을 읽어옵니다.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정 클래스"""

    # Redis 설정 (실시간 데이터 저장소)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str = ""

    # 데이터베이스 설정 (영구 저장소)
    database_url: str = "sqlite:///./sales.db"

    # 재고 설정
    stock_ttl_seconds: int = 3600

    # 락 설정 (재고 선점용 임대 락)
    lock_timeout_seconds: int = 30
    lock_retry_attempts: int = 3
    lock_retry_delay_ms: int = 100

    # 장바구니 / 주문 캐시 설정
    cart_ttl_days: int = 7
    order_status_ttl_days: int = 7
    order_stats_ttl_days: int = 7
    product_cache_ttl_seconds: int = 300

    # 실시간 대시보드 설정
    dashboard_ttl_seconds: int = 3600

    # 애플리케이션 설정
    app_env: str = "development"
    log_level: str = "INFO"
    log_format: str = "console"  # console 또는 json

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # 정의되지 않은 환경 변수 무시
    )

    @property
    def redis_url(self) -> str:
        """
        Redis 연결 URL 생성

        비밀번호가 있는 경우: redis://:password@host:port/db
        비밀번호가 없는 경우: redis://host:port/db
        """
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def cart_ttl_seconds(self) -> int:
        return self.cart_ttl_days * 24 * 3600

    @property
    def order_status_ttl_seconds(self) -> int:
        return self.order_status_ttl_days * 24 * 3600

    @property
    def order_stats_ttl_seconds(self) -> int:
        return self.order_stats_ttl_days * 24 * 3600


def get_settings() -> Settings:
    """
    Settings 인스턴스를 반환하는 팩토리 함수
    """
    return Settings()
