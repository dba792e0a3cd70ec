"""
런타임 환경 설정
.env 파일 및 환경변수 기반 설정 로드
"""
import os
from typing import Optional

from dotenv import load_dotenv

# 환경변수 로드
load_dotenv()


class Settings:
    """애플리케이션 런타임 설정"""

    def __init__(self):
        self.database_url: Optional[str] = os.getenv("DATABASE_URL") or None
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.analysis_delay_seconds: float = float(os.getenv("ANALYSIS_DELAY_SECONDS", "0"))
        self.product_match_limit: int = int(os.getenv("PRODUCT_MATCH_LIMIT", "10"))
        self.products_fallback_file: str = os.getenv(
            "PRODUCTS_FALLBACK_FILE",
            os.path.join(os.path.dirname(os.path.dirname(__file__)), "data", "products_fallback.json")
        )

    @property
    def database_enabled(self) -> bool:
        """PostgreSQL 사용 여부"""
        return bool(self.database_url)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """설정 인스턴스 반환"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
