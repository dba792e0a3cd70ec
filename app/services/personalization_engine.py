"""
통합 개인화 엔진
설문 응답 -> 피부 타입 분류 -> 고민 우선순위 -> 성분 추천 -> 루틴/예상 결과/위험도 -> 인사이트
엔진 자체는 순수 함수이고, 카탈로그 조회·프로필 저장·이력 기록은 PersonalizationService가 담당
"""
from typing import List, Dict, Optional, Any
from collections import deque
from datetime import datetime
import logging

from app.config.scoring_config import SkinTraits
from app.models.catalog_models import CatalogFilter, CatalogProduct
from app.models.personalization_models import (
    QuestionnaireResponse, PersonalizedProfile, CatalogUnavailableError,
    ProfilePersistenceError, SkinTypeClassification
)
from app.interfaces.personalization_interfaces import (
    ICatalogStore, IProfileRepository, IAnalysisHistoryLog
)
from app.services.skin_type_classifier import SkinTypeClassifier
from app.services.concern_prioritizer import ConcernPrioritizer
from app.services.ingredient_recommender import IngredientRecommender, IngredientDatabase
from app.services.routine_generator import RoutineGenerator
from app.services.outcome_predictor import OutcomePredictor
from app.services.risk_assessor import RiskAssessor, RiskContext
from app.services.insight_generator import InsightGenerator
from app.services.product_matcher import ProductMatcher

logger = logging.getLogger(__name__)

ALGORITHM_VERSION = "1.0"
HISTORY_CAPACITY = 1000

class PersonalizationEngine:
    """
    개인화 엔진 (상태 없음)

    동일한 입력과 동일한 참조 테이블이면 항상 동일한 PersonalizedProfile을 반환
    """

    def __init__(
        self,
        classifier: Optional[SkinTypeClassifier] = None,
        prioritizer: Optional[ConcernPrioritizer] = None,
        recommender: Optional[IngredientRecommender] = None,
        routine_generator: Optional[RoutineGenerator] = None,
        outcome_predictor: Optional[OutcomePredictor] = None,
        risk_assessor: Optional[RiskAssessor] = None,
        insight_generator: Optional[InsightGenerator] = None,
        product_matcher: Optional[ProductMatcher] = None,
        ingredient_database: Optional[IngredientDatabase] = None
    ):
        database = ingredient_database or IngredientDatabase()
        self.classifier = classifier or SkinTypeClassifier()
        self.prioritizer = prioritizer or ConcernPrioritizer()
        self.recommender = recommender or IngredientRecommender(database=database)
        self.routine_generator = routine_generator or RoutineGenerator()
        self.outcome_predictor = outcome_predictor or OutcomePredictor()
        self.risk_assessor = risk_assessor or RiskAssessor()
        self.insight_generator = insight_generator or InsightGenerator()
        self.product_matcher = product_matcher or ProductMatcher(database=database)

    def analyze(
        self,
        response: QuestionnaireResponse,
        products: Optional[List[CatalogProduct]] = None,
        product_limit: int = 10,
        classification: Optional[SkinTypeClassification] = None
    ) -> PersonalizedProfile:
        """
        개인화 분석 실행

        Args:
            response: 설문 응답 (누락 값은 기본값으로 대체)
            products: 매칭할 카탈로그 후보 제품 (None이면 제품 매칭 생략)
            product_limit: 제품 매칭 최대 개수
            classification: 이미 계산한 분류 결과 (None이면 새로 분류)

        Returns:
            PersonalizedProfile: 분석 결과
        """
        # 1단계: 피부 타입 분류
        if classification is None:
            classification = self.classifier.classify(response)

        # 2단계: 고민 우선순위
        concern_priority = self.prioritizer.prioritize(response)

        # 3단계: 성분 추천
        ingredients = self.recommender.recommend(classification.type, concern_priority)
        ingredient_names = [rec.name for rec in ingredients]

        # 4단계: 루틴 / 예상 결과 / 위험도
        routine = self.routine_generator.generate(classification.type, concern_priority)
        outcomes = self.outcome_predictor.predict(ingredient_names)
        risk = self.risk_assessor.assess(
            RiskContext.from_response(ingredient_names, classification.type, response)
        )

        # 5단계: 인사이트
        insights = self.insight_generator.generate_insights(
            response, classification, concern_priority, ingredients, risk
        )
        score = self.insight_generator.personalization_score(response, classification)

        matches = ()
        if products is not None:
            matches = tuple(self.product_matcher.match_products(
                products, response, classification, concern_priority, ingredients, limit=product_limit
            ))

        logger.info(
            f"✅ 분석 완료: {classification.type.value} ({classification.confidence_percent}%), "
            f"고민 {len(concern_priority.ranked)}개, 성분 {len(ingredients)}개, 제품 {len(matches)}개"
        )

        return PersonalizedProfile(
            skin_type=classification,
            concern_priority=concern_priority,
            ingredient_recommendations=tuple(ingredients),
            routine=routine,
            predicted_outcomes=outcomes,
            risk_assessment=risk,
            personalization_score=score,
            ai_insights=tuple(insights),
            product_matches=matches,
            products_enriched=products is not None,
            algorithm_version=ALGORITHM_VERSION
        )

class InMemoryAnalysisHistoryLog(IAnalysisHistoryLog):
    """메모리 기반 분석 이력 (최근 1000건 유지)"""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        self._entries = deque(maxlen=capacity)

    def append(self, entry: Dict[str, Any]) -> None:
        self._entries.append(dict(entry))

    def entries(self) -> List[Dict[str, Any]]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

class PersonalizationService:
    """
    개인화 분석 서비스

    카탈로그 조회 실패 시 제품 매칭 없는 엔진 결과로 대체하고,
    프로필 저장 실패는 로그만 남기고 결과를 그대로 반환
    """

    def __init__(
        self,
        engine: Optional[PersonalizationEngine] = None,
        catalog_store: Optional[ICatalogStore] = None,
        profile_repository: Optional[IProfileRepository] = None,
        history_log: Optional[IAnalysisHistoryLog] = None,
        product_limit: int = 10
    ):
        self.engine = engine or PersonalizationEngine()
        self.catalog_store = catalog_store
        self.profile_repository = profile_repository
        self.history_log = history_log
        self.product_limit = product_limit

    async def analyze_and_store(
        self,
        response: QuestionnaireResponse,
        profile_key: Optional[str] = None
    ) -> PersonalizedProfile:
        """분석 + 제품 매칭 + 프로필 저장 + 이력 기록"""
        # 후보 제품 조회에는 분류 결과가 필요하므로 분류를 먼저 수행
        classification = self.engine.classifier.classify(response)
        products = await self._fetch_candidates(classification.type.value)

        profile = self.engine.analyze(
            response,
            products=products,
            product_limit=self.product_limit,
            classification=classification
        )

        if profile_key:
            await self._save_profile(profile_key, profile)

        self._record_history(response, profile, profile_key)
        return profile

    async def load_profile(self, profile_key: str) -> Optional[Dict[str, Any]]:
        """저장된 프로필 조회 (저장소 오류 시 None)"""
        if self.profile_repository is None:
            return None
        try:
            return await self.profile_repository.load(profile_key)
        except ProfilePersistenceError as e:
            logger.warning(f"⚠️ 프로필 조회 실패 ({profile_key}): {e}")
            return None

    async def _fetch_candidates(self, skin_type: str) -> Optional[List[CatalogProduct]]:
        if self.catalog_store is None:
            return None

        catalog_filter = CatalogFilter(skin_type=skin_type)
        try:
            products = await self.catalog_store.fetch_candidate_products(catalog_filter)
            logger.info(f"🛍️ 후보 제품 {len(products)}개 조회 ({skin_type})")
            return products
        except CatalogUnavailableError as e:
            logger.warning(f"⚠️ 카탈로그 조회 실패 - 제품 매칭 없이 진행: {e}")
        except Exception as e:
            logger.error(f"❌ 카탈로그 조회 중 예상치 못한 오류 - 제품 매칭 없이 진행: {e}")
        return None

    async def _save_profile(self, profile_key: str, profile: PersonalizedProfile):
        if self.profile_repository is None:
            return
        try:
            await self.profile_repository.save(profile_key, profile.to_dict())
            logger.debug(f"프로필 저장 완료: {profile_key}")
        except ProfilePersistenceError as e:
            logger.warning(f"⚠️ 프로필 저장 실패 ({profile_key}): {e}")
        except Exception as e:
            logger.error(f"❌ 프로필 저장 중 예상치 못한 오류 ({profile_key}): {e}")

    def _record_history(
        self,
        response: QuestionnaireResponse,
        profile: PersonalizedProfile,
        profile_key: Optional[str]
    ):
        if self.history_log is None:
            return
        self.history_log.append({
            "timestamp": datetime.now().isoformat(),
            "profile_key": profile_key,
            "answered_traits": response.answered_trait_count,
            "total_traits": len(SkinTraits.ALL),
            "concerns": list(response.selected_concerns),
            "skin_type": profile.skin_type.type.value,
            "confidence": profile.skin_type.confidence,
            "personalization_score": profile.personalization_score,
            "products_enriched": profile.products_enriched
        })
