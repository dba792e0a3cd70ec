"""
피부 고민 우선순위 결정
고민별 척도 선형 결합 점수로 정렬하고 긴급도/치료 복잡도를 산정
"""
import logging

from app.config.scoring_config import ConcernConfig
from app.models.personalization_models import (
    QuestionnaireResponse, ConcernPriority, PrioritizedConcern,
    Urgency, TreatmentComplexity
)

logger = logging.getLogger(__name__)

class ConcernPrioritizer:
    """고민 우선순위 결정기"""

    def __init__(self, config: type = ConcernConfig):
        self.config = config

    def prioritize(self, response: QuestionnaireResponse) -> ConcernPriority:
        """
        선택한 고민의 우선순위 결정

        입력 순서를 보존하는 안정 정렬이므로 동점 고민은 사용자가 선택한 순서를 따른다.
        """
        scored = [self._score_concern(response, label) for label in response.selected_concerns]
        ranked = sorted(scored, key=lambda concern: concern.priority_score, reverse=True)

        unknown = [c.label for c in ranked if not c.is_known]
        if unknown:
            logger.info(f"테이블에 없는 고민 - 기본 우선순위 적용: {unknown}")

        return ConcernPriority(
            ranked=tuple(ranked),
            treatment_complexity=self.treatment_complexity(len(ranked))
        )

    def _score_concern(self, response: QuestionnaireResponse, label: str) -> PrioritizedConcern:
        formula = self.config.PRIORITY_FORMULAS.get(label)
        if formula is None:
            return PrioritizedConcern(
                label=label,
                priority_score=self.config.DEFAULT_PRIORITY,
                urgency=Urgency.LOW,
                is_known=False
            )

        score = sum(response.scale(trait) * weight for trait, weight in formula.items())
        return PrioritizedConcern(
            label=label,
            priority_score=round(score, 4),
            urgency=self.urgency(response, label)
        )

    def urgency(self, response: QuestionnaireResponse, label: str) -> Urgency:
        """기준 항목 값과 고민별 임계값으로 긴급도 산정"""
        threshold = self.config.URGENCY_THRESHOLDS.get(label)
        if threshold is None:
            return Urgency.LOW

        trait, (medium, high, critical) = threshold
        value = response.scale(trait)
        if value >= critical:
            return Urgency.CRITICAL
        elif value >= high:
            return Urgency.HIGH
        elif value >= medium:
            return Urgency.MEDIUM
        return Urgency.LOW

    def treatment_complexity(self, concern_count: int) -> TreatmentComplexity:
        """선택한 고민 수 기반 치료 복잡도"""
        if concern_count <= self.config.SIMPLE_MAX_CONCERNS:
            return TreatmentComplexity.SIMPLE
        elif concern_count <= self.config.MODERATE_MAX_CONCERNS:
            return TreatmentComplexity.MODERATE
        return TreatmentComplexity.COMPLEX
