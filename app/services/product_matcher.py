"""
카탈로그 제품 AI 매칭
분석된 피부 프로필과 카탈로그 제품을 비교해 매칭 점수, 매칭 근거, 예상 효과, 사용 가이드를 생성
"""
from typing import List, Optional, Sequence, Set
import logging
import math

from app.config.scoring_config import Concerns, ProductMatchConfig
from app.models.catalog_models import CatalogProduct
from app.models.personalization_models import (
    QuestionnaireResponse, SkinTypeClassification, ConcernPriority,
    IngredientRecommendation, ProductMatch
)
from app.services.ingredient_recommender import IngredientDatabase

logger = logging.getLogger(__name__)

class ProductMatcher:
    """제품 AI 매칭 점수 계산기"""

    def __init__(self, database: Optional[IngredientDatabase] = None, config: type = ProductMatchConfig):
        self.database = database or IngredientDatabase()
        self.config = config

    def match_products(
        self,
        products: Sequence[CatalogProduct],
        response: QuestionnaireResponse,
        classification: SkinTypeClassification,
        concern_priority: ConcernPriority,
        ingredients: Sequence[IngredientRecommendation],
        limit: int = 10
    ) -> List[ProductMatch]:
        """제품별 매칭 결과 생성 (점수 내림차순, 동점은 카탈로그 순서)"""
        matches = [
            self.match_product(product, response, classification, concern_priority, ingredients)
            for product in products
        ]
        matches.sort(key=lambda match: match.ai_match_score, reverse=True)
        return matches[:limit]

    def match_product(
        self,
        product: CatalogProduct,
        response: QuestionnaireResponse,
        classification: SkinTypeClassification,
        concern_priority: ConcernPriority,
        ingredients: Sequence[IngredientRecommendation]
    ) -> ProductMatch:
        """단일 제품 매칭"""
        concerns = set(concern_priority.concerns)
        score = self.calculate_match_score(product, response, classification, concerns, ingredients)

        return ProductMatch(
            product_id=product.id,
            name=product.name,
            brand=product.brand,
            price=product.price,
            ai_match_score=score,
            match_reasons=tuple(self.generate_match_reasons(product, score, response)),
            predicted_results=tuple(self.generate_predicted_results(product, score, concerns)),
            usage_timeline=self.generate_usage_timeline(product),
            expected_timeline=(
                "Results expected in 2-3 weeks" if score > 85 else "Results expected in 4-6 weeks"
            ),
            image_url=product.image_url
        )

    def calculate_match_score(
        self,
        product: CatalogProduct,
        response: QuestionnaireResponse,
        classification: SkinTypeClassification,
        concerns: Set[str],
        ingredients: Sequence[IngredientRecommendation]
    ) -> int:
        """
        제품 AI 매칭 점수 (0-100)

        피부타입 적합 30 + 고민-효능 겹침 30 + 추천 성분 포함 25 + 임상 근거 10
        + 루틴 성실도/장기 목표 보너스 - 금기 성분 감점
        """
        skin_type = classification.type.value
        score = 0.0

        if product.suits_skin_type(skin_type):
            score += self.config.SKIN_TYPE_POINTS

        wanted = {self.config.CONCERN_BENEFITS[c] for c in concerns if c in self.config.CONCERN_BENEFITS}
        if wanted:
            offered = {benefit.lower() for benefit in product.benefits}
            score += len(wanted & offered) / len(wanted) * self.config.BENEFIT_POINTS

        if ingredients:
            product_ingredients = {name.lower() for name in product.ingredients}
            hits = sum(1 for rec in ingredients if rec.name.lower() in product_ingredients)
            expected = min(3, len(ingredients))
            score += min(1.0, hits / expected) * self.config.INGREDIENT_POINTS

        score += min(100.0, max(0.0, product.clinical_evidence_score)) * self.config.CLINICAL_EVIDENCE_FACTOR

        if self.config.COMMITMENT_HABIT in response.routine_habits:
            score += self.config.COMMITMENT_BONUS
        if self.config.PATIENCE_GOAL in response.goals:
            score += self.config.PATIENCE_BONUS

        contraindicated = {name.lower() for name in self.database.contraindicated_names(skin_type)}
        if contraindicated & {name.lower() for name in product.ingredients}:
            score -= self.config.CONTRAINDICATION_PENALTY

        return int(max(0, min(100, math.floor(score + 0.5))))

    def generate_match_reasons(self, product: CatalogProduct, score: int, response: QuestionnaireResponse) -> List[str]:
        """매칭 근거 (최대 3개)"""
        reasons = []

        if score > 90:
            reasons.append("Exceptional compatibility with your skin profile")
            reasons.append("Addresses your top 3 concerns simultaneously")
        elif score > 80:
            reasons.append("High compatibility with your skin type")
            reasons.append("Targets your primary skin concerns")
        elif score > 70:
            reasons.append("Good match for your skin profile")
            reasons.append("Supports your skincare goals")

        if self.config.SCIENCE_PREFERENCE in response.preferences and product.clinical_evidence_score > 80:
            reasons.append("Contains clinically-proven ingredients")

        if self.config.MINIMAL_ROUTINE_HABIT in response.routine_habits:
            reasons.append("Fits your preferred minimal routine")

        return reasons[:self.config.MAX_REASONS]

    def generate_predicted_results(self, product: CatalogProduct, score: int, concerns: Set[str]) -> List[str]:
        """제품별 예상 효과"""
        results = []
        benefits = {benefit.lower() for benefit in product.benefits}

        if score > 80:
            results.append("Excellent compatibility with your skin")

        if concerns & Concerns.ACNE_GROUP and "acne-fighting" in benefits:
            results.append("Visible reduction in breakouts within 2-4 weeks")

        if concerns & Concerns.AGING_GROUP and "anti-aging" in benefits:
            results.append("Improved skin texture and firmness in 4-6 weeks")

        if concerns & Concerns.HYDRATION_GROUP and "hydrating" in benefits:
            results.append("Enhanced hydration levels within 1-2 weeks")

        if product.clinical_evidence_score > 80:
            results.append("Clinically proven ingredients for reliable results")

        return results

    @staticmethod
    def generate_usage_timeline(product: CatalogProduct) -> str:
        """사용 빈도/제품명 기반 사용 가이드"""
        name = (product.name or "").lower()

        if product.usage_frequency == "twice-daily":
            return "Use morning and evening for optimal results"
        elif product.usage_frequency == "weekly":
            return "Use 1-2 times per week as a treatment"
        elif "serum" in name:
            return "Apply daily in the evening, introduce gradually"
        elif "moisturizer" in name:
            return "Use twice daily as the final step in your routine"

        return "Use daily as part of your skincare routine"
