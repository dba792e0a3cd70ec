"""
피부 타입 분류기
척도 응답에 가중치 테이블을 적용해 5개 피부 타입 점수를 계산하고 최고 점수 타입을 선택
"""
from typing import Dict, List, Tuple
import logging

from app.config.scoring_config import ClassifierConfig, SkinTraits
from app.models.personalization_models import (
    ClassificationError, QuestionnaireResponse, SkinType, SkinTypeClassification
)

logger = logging.getLogger(__name__)

class SkinTypeClassifier:
    """가중치 기반 피부 타입 분류기"""

    def __init__(self, config: type = ClassifierConfig):
        self.config = config

    def classify(self, response: QuestionnaireResponse) -> SkinTypeClassification:
        """
        피부 타입 분류

        Args:
            response: 설문 응답 (미응답 척도는 5로 간주)

        Returns:
            SkinTypeClassification: 타입, 신뢰도, 타입별 점수
        """
        scores = self.calculate_type_scores(response)
        ranked = self._rank_types(scores)
        if not ranked:
            raise ClassificationError("분류할 피부 타입이 없습니다 (SKIN_TYPES 설정 확인)")

        top_type, top_score = ranked[0]
        second_score = ranked[1][1] if len(ranked) > 1 else 0.0
        confidence = self.calculate_confidence(top_score, second_score)

        logger.debug(f"피부 타입 분류: {top_type} (점수 {top_score:.2f}, 신뢰도 {confidence:.3f})")

        return SkinTypeClassification(
            type=SkinType(top_type),
            confidence=confidence,
            score_per_type=scores
        )

    def calculate_type_scores(self, response: QuestionnaireResponse) -> Dict[str, float]:
        """타입별 점수 계산"""
        scores: Dict[str, float] = {}

        for skin_type, weights in self.config.TYPE_WEIGHTS.items():
            scores[skin_type] = self._weighted_sum(response, weights)

        scores["combination"] = self._combination_score(response)
        scores["normal"] = self._normal_score(response)

        # 반환 순서는 ClassifierConfig.SKIN_TYPES 기준
        return {skin_type: round(scores[skin_type], 4) for skin_type in self.config.SKIN_TYPES}

    def _weighted_sum(self, response: QuestionnaireResponse, weights: Dict[str, float]) -> float:
        return sum(response.scale(trait) * weight for trait, weight in weights.items())

    def _combination_score(self, response: QuestionnaireResponse) -> float:
        """복합성 점수: |유분 - 건조| 가 임계값 초과면 높은 기본값"""
        gap = abs(response.scale(SkinTraits.OILINESS) - response.scale(SkinTraits.DRYNESS))
        if gap > self.config.COMBINATION_GAP_THRESHOLD:
            base = self.config.COMBINATION_HIGH_BASE
        else:
            base = self.config.COMBINATION_LOW_BASE
        return base * self.config.COMBINATION_WEIGHT

    def _normal_score(self, response: QuestionnaireResponse) -> float:
        """중성 점수: 10 - 중간값 대비 가중 평균 절대편차"""
        weights = self.config.NORMAL_DEVIATION_WEIGHTS
        total_weight = sum(weights.values())
        deviation = sum(
            abs(response.scale(trait) - self.config.NORMAL_MIDPOINT) * weight
            for trait, weight in weights.items()
        ) / total_weight
        return self.config.NORMAL_CEILING - deviation

    def _rank_types(self, scores: Dict[str, float]) -> List[Tuple[str, float]]:
        """점수 내림차순 정렬 (동점은 TIE_BREAK_ORDER 순)"""
        priority = {skin_type: index for index, skin_type in enumerate(self.config.TIE_BREAK_ORDER)}
        return sorted(scores.items(), key=lambda item: (-item[1], priority[item[0]]))

    def calculate_confidence(self, top_score: float, second_score: float) -> float:
        """1위-2위 점수 차 기반 신뢰도 ([0.70, 0.98] 범위)"""
        gap = max(0.0, top_score - second_score)
        confidence = self.config.CONFIDENCE_FLOOR + self.config.CONFIDENCE_SPAN * gap / self.config.CONFIDENCE_GAP_SCALE
        confidence = max(self.config.CONFIDENCE_FLOOR, min(self.config.CONFIDENCE_CEILING, confidence))
        return round(confidence, 4)
