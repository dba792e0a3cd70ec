#!/usr/bin/env python3
"""
카탈로그 필터/정렬 및 저장소 테스트
"""

import asyncio
import os
import sys

import pytest

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.models.catalog_models import CatalogFilter, CatalogProduct
from app.models.personalization_models import CatalogUnavailableError
from app.services.catalog_service import (
    JsonCatalogStore, PostgresCatalogStore, build_catalog_store, escape_like
)

FALLBACK_FILE = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), "app", "data", "products_fallback.json"
)

def fetch(catalog_filter: CatalogFilter):
    return asyncio.run(JsonCatalogStore(FALLBACK_FILE).fetch_candidate_products(catalog_filter))

class OfflineDB:
    async def execute_query(self, query, *args):
        raise ConnectionError("database offline")

def test_default_sort_by_ai_match():
    products = fetch(CatalogFilter())

    assert len(products) == 6
    assert [p.id for p in products][:2] == ["1", "3"]

def test_search_matches_name_brand_and_description():
    assert {p.id for p in fetch(CatalogFilter(search="glowlab"))} == {"1", "4"}
    assert {p.id for p in fetch(CatalogFilter(search="HYALURONIC"))} == {"5"}

def test_category_filter():
    assert {p.id for p in fetch(CatalogFilter(category="Serums"))} == {"1", "4"}
    assert len(fetch(CatalogFilter(category="All"))) == 6

def test_all_types_products_match_every_skin_type():
    ids = [p.id for p in fetch(CatalogFilter(skin_type="Oily", sort_by="price-low"))]

    assert ids == ["6", "3", "1"]

def test_price_ranges_are_any_of_and_inclusive():
    products = fetch(CatalogFilter(price_ranges=[(0, 2000), (5199, None)], sort_by="price-high"))

    assert [p.id for p in products] == ["2", "6"]

def test_rating_sort_and_limit():
    products = fetch(CatalogFilter(sort_by="rating", limit=2))

    assert [p.rating for p in products] == [4.9, 4.8]

def test_from_db_row_parses_json_strings():
    product = CatalogProduct.from_db_row({
        "id": 7, "name": "Test", "price": "12.5",
        "skin_types": '["Oily"]', "benefits": "hydrating, soothing", "ingredients": None
    })

    assert product.id == "7"
    assert product.price == 12.5
    assert product.skin_types == ["Oily"]
    assert product.benefits == ["hydrating", "soothing"]
    assert product.ingredients == []

def test_missing_file_raises_catalog_unavailable():
    with pytest.raises(CatalogUnavailableError):
        asyncio.run(JsonCatalogStore("/nonexistent.json").fetch_candidate_products(CatalogFilter()))

def test_postgres_store_falls_back_to_json():
    store = PostgresCatalogStore(OfflineDB(), fallback=JsonCatalogStore(FALLBACK_FILE))
    products = asyncio.run(store.fetch_candidate_products(CatalogFilter(category="Toners")))

    assert [p.id for p in products] == ["6"]

def test_postgres_store_without_fallback_raises():
    store = PostgresCatalogStore(OfflineDB())

    with pytest.raises(CatalogUnavailableError):
        asyncio.run(store.fetch_candidate_products(CatalogFilter()))

def test_build_query_parameters():
    query, params = PostgresCatalogStore.build_query(CatalogFilter(
        search="serum", category="Serums", skin_type="oily",
        price_ranges=[(0, 2000), (6000, None)], sort_by="price-low", limit=10
    ))

    assert params == ["%serum%", "Serums", ["oily", "all types"], 0, 2000, 6000, 10]
    assert "ILIKE $1" in query
    assert "category = $2" in query
    assert "ANY($3)" in query
    assert "(price >= $4 AND price <= $5) OR (price >= $6)" in query
    assert query.endswith("ORDER BY price ASC, id ASC LIMIT $7")

def test_build_catalog_store_without_database():
    assert isinstance(build_catalog_store(None, FALLBACK_FILE), JsonCatalogStore)

def test_search_wildcards_are_escaped():
    query, params = PostgresCatalogStore.build_query(CatalogFilter(search="50%_off"))

    assert params[0] == "%50\\%\\_off%"
    assert "ILIKE $1 ESCAPE '\\'" in query
    assert escape_like("a\\b") == "a\\\\b"
