"""
예상 결과 타임라인 생성
1/4/8/12주 버킷에 기본 문구와 추천 성분별 조건부 문구를 채움
"""
from typing import Dict, List, Iterable
import logging

from app.config.scoring_config import OutcomeConfig
from app.models.personalization_models import OutcomeTimeline

logger = logging.getLogger(__name__)

class OutcomePredictor:
    """예상 결과 생성기"""

    def __init__(self, config: type = OutcomeConfig):
        self.config = config

    def predict(self, ingredient_names: Iterable[str]) -> OutcomeTimeline:
        """추천 성분 목록으로 타임라인 생성"""
        present = set(ingredient_names)
        buckets: Dict[str, List[str]] = {
            bucket: list(self.config.BASE_STATEMENTS.get(bucket, [])) for bucket in self.config.BUCKETS
        }

        for bucket, ingredient, statement in self.config.INGREDIENT_STATEMENTS:
            if ingredient in present:
                buckets[bucket].append(statement)

        return OutcomeTimeline(
            week_1=tuple(buckets["week_1"]),
            week_4=tuple(buckets["week_4"]),
            week_8=tuple(buckets["week_8"]),
            week_12=tuple(buckets["week_12"])
        )
