"""
SQLAlchemy 테이블 정의
제품 카탈로그(products)와 피부 분석 프로필 캐시(skin_profiles)
"""
from typing import Optional
import logging

from sqlalchemy import create_engine, Column, Integer, String, DateTime, Text, Float
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import JSONB

from app.config.settings import get_settings

logger = logging.getLogger(__name__)

# Base 클래스 생성
Base = declarative_base()


class Product(Base):
    """제품 카탈로그"""
    __tablename__ = "products"

    id = Column(String(64), primary_key=True)
    name = Column(String(200), nullable=False)
    brand = Column(String(100), nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    rating = Column(Float, nullable=True)
    review_count = Column(Integer, nullable=True, default=0)
    category = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    benefits = Column(JSONB, nullable=True)       # ["hydrating", "anti-aging", ...]
    skin_types = Column(JSONB, nullable=True)     # ["oily", "combination"] 또는 ["All Types"]
    ingredients = Column(JSONB, nullable=True)
    clinical_evidence_score = Column(Float, nullable=True)
    usage_frequency = Column(String(20), nullable=True)  # 'daily', 'twice-daily', 'weekly'
    ai_match_score = Column(Float, nullable=True)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class SkinProfile(Base):
    """피부 분석 프로필 캐시 (키당 1건, 마지막 저장 우선)"""
    __tablename__ = "skin_profiles"

    profile_key = Column(String(100), primary_key=True)
    profile = Column(JSONB, nullable=False)
    skin_type = Column(String(20), nullable=True)
    personalization_score = Column(Integer, nullable=True)
    algorithm_version = Column(String(20), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


_engine: Optional[Engine] = None

def get_engine() -> Engine:
    """동기 SQLAlchemy 엔진 (스키마 생성 / 헬스체크용)"""
    global _engine
    if _engine is None:
        database_url = get_settings().database_url
        if not database_url:
            raise ValueError("DATABASE_URL 환경변수가 설정되지 않았습니다.")
        _engine = create_engine(database_url, pool_pre_ping=True)
    return _engine


def create_tables():
    """테이블 생성 (이미 있으면 유지)"""
    Base.metadata.create_all(bind=get_engine())
    logger.info("데이터베이스 테이블 확인 완료: products, skin_profiles")
