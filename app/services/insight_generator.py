"""
AI 인사이트 생성기
분류/추천 결과와 인구통계·환경 응답으로 안내 문구와 개인화 점수를 생성
"""
from typing import List, Sequence
import logging
import math

from app.config.scoring_config import ClassifierConfig, InsightConfig, SkinTraits
from app.models.personalization_models import (
    QuestionnaireResponse, SkinTypeClassification, ConcernPriority,
    IngredientRecommendation, RiskAssessment
)

logger = logging.getLogger(__name__)

class InsightGenerator:
    """인사이트 및 개인화 점수 생성기"""

    def __init__(self, config: type = InsightConfig):
        self.config = config

    def generate_insights(
        self,
        response: QuestionnaireResponse,
        classification: SkinTypeClassification,
        concern_priority: ConcernPriority,
        ingredients: Sequence[IngredientRecommendation],
        risk: RiskAssessment
    ) -> List[str]:
        """인사이트 문구 생성"""
        skin_type = classification.type.value
        insights = [
            f"Your skin profile is classified as {skin_type} with "
            f"{classification.confidence_percent}% confidence"
        ]

        top = concern_priority.top_concern
        if top is not None:
            insights.append(f"Top priority: {top.label} ({top.urgency.value} urgency)")
            insights.append(
                f"{len(concern_priority.ranked)} selected concern(s) call for a "
                f"{concern_priority.treatment_complexity.value} treatment plan"
            )

        if ingredients:
            best = ingredients[0]
            insights.append(f"{best.name} is your strongest ingredient match at {best.match_percent}%")

        insights.extend(self.skin_recommendations(response, skin_type))

        if risk.has_warnings:
            insights.append("Review the ingredient cautions before introducing new actives")

        return insights

    def skin_recommendations(self, response: QuestionnaireResponse, skin_type: str) -> List[str]:
        """피부 타입/연령/기후별 관리 팁"""
        tips = list(self.config.SKIN_TYPE_TIPS.get(skin_type, self.config.SKIN_TYPE_TIPS["normal"]))

        if response.demographics & self.config.MATURE_AGE_LABELS:
            tips.extend(self.config.MATURE_TIPS)

        if response.environment_factors & self.config.HUMID_CLIMATES:
            tips.append(self.config.HUMID_TIP)
        elif response.environment_factors & self.config.DRY_CLIMATES:
            tips.append(self.config.DRY_TIP)

        return tips

    def personalization_score(
        self,
        response: QuestionnaireResponse,
        classification: SkinTypeClassification
    ) -> int:
        """
        개인화 점수 (0-100)

        기본 40 + 척도 응답률 30 + 고민 수(3개 포화) 10 + 분류 신뢰도 20
        """
        completeness = response.answered_trait_count / len(SkinTraits.ALL)
        concern_ratio = min(len(response.selected_concerns), self.config.CONCERN_SATURATION) / self.config.CONCERN_SATURATION
        confidence_ratio = (classification.confidence - ClassifierConfig.CONFIDENCE_FLOOR) / ClassifierConfig.CONFIDENCE_SPAN

        raw = (
            self.config.PERSONALIZATION_BASE
            + completeness * self.config.SCALE_COMPLETENESS_WEIGHT
            + concern_ratio * self.config.CONCERN_WEIGHT
            + confidence_ratio * self.config.CONFIDENCE_WEIGHT
        )
        return int(max(0, min(100, math.floor(raw + 0.5))))
