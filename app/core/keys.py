"""
Redis 키 레이아웃

외부 도구가 키를 직접 읽을 수 있으므로 접두사는 변경하지 않습니다.
"""

from datetime import date


class RedisKeys:
    """Redis 키 접두사 및 키 생성 함수"""

    # 상품 재고
    STOCK_PREFIX = "stock:"
    SECKILL_STOCK_PREFIX = "seckill_stock:"

    # 장바구니
    CART_PREFIX = "cart:"

    # 판매 랭킹
    RANK_DAILY_SALE = "rank:daily:sale"
    RANK_WEEKLY_SALE = "rank:weekly:sale"
    RANK_MONTHLY_SALE = "rank:monthly:sale"
    HOT_PRODUCTS = "hot:products"

    # 실시간 대시보드
    DASHBOARD_PREFIX = "dashboard:"
    STAT_ORDERS_TODAY = "stat:orders:today"
    STAT_SALES_TODAY = "stat:sales:today"

    # 주문 상태 캐시 / 집계 마커
    ORDER_STATUS_PREFIX = "order:status:"
    ORDER_STATS_PREFIX = "order:stats:"

    # 분산 락
    LOCK_PREFIX = "lock:"

    # 상품 정보 캐시
    PRODUCT_CACHE_PREFIX = "product:cache:"

    @staticmethod
    def stock(product_id: str) -> str:
        return f"{RedisKeys.STOCK_PREFIX}{product_id}"

    @staticmethod
    def flash_stock(sale_id: str, product_id: str) -> str:
        return f"{RedisKeys.SECKILL_STOCK_PREFIX}{sale_id}_{product_id}"

    @staticmethod
    def lock(resource_key: str) -> str:
        """재고 키에 대한 락 키 (예: lock:stock:P100)"""
        return f"{RedisKeys.LOCK_PREFIX}{resource_key}"

    @staticmethod
    def cart(user_id: str) -> str:
        return f"{RedisKeys.CART_PREFIX}{user_id}"

    @staticmethod
    def order_status(order_id: str) -> str:
        return f"{RedisKeys.ORDER_STATUS_PREFIX}{order_id}"

    @staticmethod
    def order_stats(order_id: str) -> str:
        return f"{RedisKeys.ORDER_STATS_PREFIX}{order_id}"

    @staticmethod
    def order_completion_stats(order_id: str) -> str:
        return f"{RedisKeys.ORDER_STATS_PREFIX}{order_id}:completed"

    @staticmethod
    def dashboard(day: date) -> str:
        """일자별 대시보드 키 (dashboard:yyyyMMdd)"""
        return f"{RedisKeys.DASHBOARD_PREFIX}{day.strftime('%Y%m%d')}"

    @staticmethod
    def product_cache(product_id: str) -> str:
        return f"{RedisKeys.PRODUCT_CACHE_PREFIX}{product_id}"
