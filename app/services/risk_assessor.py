"""
위험도 평가 시스템
추천 성분 조합의 과다 사용, 성분 충돌, 민감 피부/임신 관련 주의사항을 판정
"""

from typing import List, Iterable, Optional
from dataclasses import dataclass, field
import logging

from app.config.scoring_config import RiskConfig, SkinTraits
from app.models.personalization_models import (
    QuestionnaireResponse, RiskAssessment, SkinType
)

logger = logging.getLogger(__name__)

@dataclass
class RiskContext:
    """위험도 평가 입력"""
    ingredient_names: List[str]
    skin_type: SkinType
    preferences: frozenset = frozenset()
    sensitivity_scale: Optional[int] = None

    @classmethod
    def from_response(
        cls,
        ingredient_names: Iterable[str],
        skin_type: SkinType,
        response: QuestionnaireResponse
    ) -> 'RiskContext':
        return cls(
            ingredient_names=list(ingredient_names),
            skin_type=skin_type,
            preferences=response.preferences,
            sensitivity_scale=response.scale(SkinTraits.SENSITIVITY)
        )

@dataclass
class _RiskAccumulator:
    conflicts: List[str] = field(default_factory=list)
    alerts: List[str] = field(default_factory=list)
    risk: int = 0

class RiskAssessor:
    """성분 조합 위험도 평가기"""

    def __init__(self, config: type = RiskConfig):
        self.config = config

    def assess(self, context: RiskContext) -> RiskAssessment:
        """
        위험도 평가

        Args:
            context: 추천 성분, 피부 타입, 선호 조건, 민감도 척도

        Returns:
            RiskAssessment: 성분 충돌, 과다 사용 위험도(0-100), 민감성 경고
        """
        present = list(dict.fromkeys(context.ingredient_names))
        acc = _RiskAccumulator()

        self._check_active_load(present, acc)
        self._check_conflicting_pairs(present, acc)
        self._check_sensitivity(present, context, acc)
        self._check_pregnancy(present, context, acc)

        risk = max(0, min(self.config.MAX_RISK, acc.risk))
        if acc.conflicts or acc.alerts:
            logger.info(f"위험도 평가: 충돌 {len(acc.conflicts)}건, 경고 {len(acc.alerts)}건, 위험도 {risk}")

        return RiskAssessment(
            ingredient_conflicts=tuple(acc.conflicts),
            over_treatment_risk=risk,
            sensitivity_alerts=tuple(acc.alerts)
        )

    def _check_active_load(self, present: List[str], acc: _RiskAccumulator):
        """고활성 성분 개수 검사"""
        actives = [name for name in present if name in self.config.ACTIVE_INGREDIENTS]
        acc.risk += len(actives) * self.config.PER_ACTIVE_RISK

        if len(actives) > self.config.MAX_SAFE_ACTIVES:
            acc.conflicts.append(
                f"{len(actives)} active ingredients ({', '.join(actives)}) together may over-exfoliate "
                f"and compromise the skin barrier; introduce them one at a time"
            )
            acc.risk += self.config.ACTIVE_OVERLOAD_RISK

    def _check_conflicting_pairs(self, present: List[str], acc: _RiskAccumulator):
        """동시 사용 금지 조합 검사"""
        names = set(present)
        for first, second, message in self.config.CONFLICTING_PAIRS:
            if first in names and second in names:
                acc.conflicts.append(message)
                acc.risk += self.config.PAIR_CONFLICT_RISK

    def _check_sensitivity(self, present: List[str], context: RiskContext, acc: _RiskAccumulator):
        """민감 피부 경고"""
        if SkinType(context.skin_type) == SkinType.SENSITIVE:
            for ingredient, alert in self.config.SENSITIVE_ALERTS.items():
                if ingredient in present:
                    acc.alerts.append(alert)
                    acc.risk += self.config.SENSITIVITY_ALERT_RISK

        if context.sensitivity_scale is not None and context.sensitivity_scale >= self.config.HIGH_SENSITIVITY_SCALE:
            acc.risk += self.config.HIGH_SENSITIVITY_RISK

    def _check_pregnancy(self, present: List[str], context: RiskContext, acc: _RiskAccumulator):
        """임신 중 사용 금지 성분 검사"""
        if self.config.PREGNANCY_SAFE_PREFERENCE not in context.preferences:
            return
        for ingredient, message in self.config.PREGNANCY_CONFLICTS.items():
            if ingredient in present:
                acc.conflicts.append(message)
