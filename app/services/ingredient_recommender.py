"""
성분 추천 시스템
성분 참조 테이블에서 피부 타입 금기/적합성과 고민 겹침을 기준으로 성분을 선별하고 매칭 점수를 계산
"""
from typing import List, Dict, Optional, Any
from dataclasses import dataclass
import logging
import math

from app.config.scoring_config import IngredientConfig
from app.models.personalization_models import (
    ConcernPriority, IngredientRecommendation, SkinType
)

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class IngredientProfile:
    """성분 참조 정보"""
    name: str
    concerns: frozenset
    skin_types: frozenset
    evidence_score: int
    synergy: frozenset
    contraindicated: frozenset
    rationale: Optional[str] = None

    @classmethod
    def from_config(cls, entry: Dict[str, Any]) -> 'IngredientProfile':
        return cls(
            name=entry["name"],
            concerns=frozenset(entry["concerns"]),
            skin_types=frozenset(entry["skin_types"]),
            evidence_score=int(entry["evidence_score"]),
            synergy=frozenset(entry["synergy"]),
            contraindicated=frozenset(entry["contraindicated"]),
            rationale=entry.get("rationale")
        )

    @property
    def suits_all_types(self) -> bool:
        return IngredientConfig.ALL_SKIN_TYPES in self.skin_types

    def is_contraindicated_for(self, skin_type: str) -> bool:
        return skin_type in self.contraindicated

    def is_compatible_with(self, skin_type: str) -> bool:
        return self.suits_all_types or skin_type in self.skin_types

class IngredientDatabase:
    """정적 성분 참조 테이블"""

    def __init__(self, entries: Optional[List[Dict[str, Any]]] = None):
        source = entries if entries is not None else IngredientConfig.INGREDIENT_DATABASE
        self._profiles: List[IngredientProfile] = [IngredientProfile.from_config(e) for e in source]
        self._by_name = {profile.name: profile for profile in self._profiles}

    def __iter__(self):
        return iter(self._profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def get(self, name: str) -> Optional[IngredientProfile]:
        """이름으로 성분 조회"""
        return self._by_name.get(name)

    def contraindicated_names(self, skin_type: str) -> List[str]:
        """해당 피부 타입에 금기인 성분 이름"""
        return [p.name for p in self._profiles if p.is_contraindicated_for(skin_type)]

class IngredientRecommender:
    """성분 추천기"""

    def __init__(self, database: Optional[IngredientDatabase] = None, config: type = IngredientConfig):
        self.database = database or IngredientDatabase()
        self.config = config

    def recommend(
        self,
        skin_type: SkinType,
        concern_priority: ConcernPriority
    ) -> List[IngredientRecommendation]:
        """
        성분 추천

        Args:
            skin_type: 분류된 피부 타입
            concern_priority: 우선순위가 매겨진 고민

        Returns:
            List[IngredientRecommendation]: 매칭 점수 내림차순 상위 6개
        """
        type_value = SkinType(skin_type).value
        prioritized = concern_priority.concerns
        recommendations = []

        for profile in self.database:
            if profile.is_contraindicated_for(type_value):
                continue
            if not profile.is_compatible_with(type_value):
                continue

            matched = [concern for concern in prioritized if concern in profile.concerns]
            if not matched:
                continue

            recommendations.append(IngredientRecommendation(
                name=profile.name,
                match_percent=self.calculate_match_percent(profile, type_value, len(matched), len(prioritized)),
                rationale=profile.rationale or self.generate_rationale(matched),
                scientific_evidence_score=profile.evidence_score,
                synergy_partners=tuple(sorted(profile.synergy)),
                targeted_concerns=tuple(matched)
            ))

        # 안정 정렬: 동점은 테이블 순서 유지
        recommendations.sort(key=lambda rec: rec.match_percent, reverse=True)
        selected = recommendations[:self.config.MAX_RECOMMENDATIONS]

        logger.debug(f"성분 추천 {len(selected)}개 (후보 {len(recommendations)}개, 피부타입 {type_value})")
        return selected

    def calculate_match_percent(
        self,
        profile: IngredientProfile,
        skin_type: str,
        overlap_count: int,
        total_concerns: int
    ) -> int:
        """
        매칭 점수 = min(98, 겹침비율*40 + 근거점수*0.4 + 피부타입 명시 적합 시 20)

        피부타입 보너스는 적합 타입에 명시된 경우에만 적용 ("all" 제외).
        """
        overlap_ratio = overlap_count / total_concerns if total_concerns else 0.0
        type_bonus = self.config.SKIN_TYPE_BONUS if skin_type in profile.skin_types else 0.0
        raw = overlap_ratio * self.config.OVERLAP_WEIGHT + profile.evidence_score * self.config.EVIDENCE_WEIGHT + type_bonus
        return int(min(self.config.MAX_MATCH_PERCENT, max(0, math.floor(raw + 0.5))))

    @staticmethod
    def generate_rationale(matched_concerns: List[str]) -> str:
        """고정 문구가 없는 성분의 근거 문구 생성 ("Targets X and Y")"""
        if len(matched_concerns) == 1:
            return f"Targets {matched_concerns[0]}"
        return f"Targets {', '.join(matched_concerns[:-1])} and {matched_concerns[-1]}"
