"""
스킨케어 루틴 생성기
피부 타입과 우선 고민에 따라 규칙 테이블로 아침/저녁 루틴을 조립
"""
from typing import List, Set
import logging

from app.config.scoring_config import Concerns, RoutineConfig
from app.models.personalization_models import (
    ConcernPriority, RoutinePlan, RoutineStep, SkinType, StepClass
)

logger = logging.getLogger(__name__)

class RoutineGenerator:
    """규칙 기반 루틴 생성기

    순서: 클렌저 -> 트리트먼트 세럼 -> 보습제 -> 선크림(AM) / 나이트 크림(PM)
    """

    def __init__(self, config: type = RoutineConfig):
        self.config = config

    def generate(self, skin_type: SkinType, concern_priority: ConcernPriority) -> RoutinePlan:
        """루틴 생성"""
        type_value = SkinType(skin_type).value
        concerns = set(concern_priority.concerns)

        morning = self._morning_steps(type_value, concerns)
        evening = self._evening_steps(type_value, concerns)

        logger.debug(f"루틴 생성: AM {len(morning)}단계, PM {len(evening)}단계 ({type_value})")
        return RoutinePlan(morning=tuple(morning), evening=tuple(evening))

    def _morning_steps(self, skin_type: str, concerns: Set[str]) -> List[RoutineStep]:
        cleanser, cleanser_reason = self.config.CLEANSER_BY_TYPE[skin_type]
        steps = [
            RoutineStep(
                step_name="Cleanse",
                product_category=cleanser,
                rationale=cleanser_reason,
                time_of_day=self.config.AM,
                application_note="Massage onto damp skin for 30-60 seconds, rinse with lukewarm water",
                step_class=StepClass.CLEANSER
            )
        ]

        if concerns & Concerns.PIGMENTATION_GROUP:
            steps.append(self._antioxidant_step(skin_type))

        if concerns & Concerns.HYDRATION_GROUP:
            steps.append(self._hydrating_serum_step())

        steps.append(RoutineStep(
            step_name="Moisturize",
            product_category=self.config.MOISTURIZER_BY_TYPE[skin_type],
            rationale="Seals in hydration and supports the skin barrier through the day",
            time_of_day=self.config.AM,
            application_note="Apply a nickel-sized amount while skin is still slightly damp",
            step_class=StepClass.MOISTURIZER
        ))
        steps.append(RoutineStep(
            step_name="Protect",
            product_category="Broad-spectrum sunscreen SPF 30+",
            rationale="Prevents UV damage, pigmentation and premature aging",
            time_of_day=self.config.AM,
            application_note="Apply two finger-lengths as the final layer; reapply every 2 hours outdoors",
            step_class=StepClass.MOISTURIZER
        ))
        return steps

    def _evening_steps(self, skin_type: str, concerns: Set[str]) -> List[RoutineStep]:
        cleanser, _ = self.config.CLEANSER_BY_TYPE[skin_type]
        steps = [
            RoutineStep(
                step_name="Double cleanse",
                product_category=f"Cleansing oil or balm, then {cleanser.lower()}",
                rationale="Dissolves sunscreen and makeup before a second cleanse clears residue",
                time_of_day=self.config.PM,
                application_note="Massage oil onto dry skin, emulsify with water, then follow with the water-based cleanser",
                step_class=StepClass.CLEANSER
            )
        ]

        needs_bha = bool(concerns & Concerns.ACNE_GROUP)
        needs_retinoid = bool(concerns & Concerns.AGING_GROUP)
        alternate = needs_bha and needs_retinoid

        if needs_bha:
            steps.append(self._bha_step(skin_type, alternate))
        if needs_retinoid:
            steps.append(self._retinoid_step(skin_type, alternate))

        if concerns & Concerns.HYDRATION_GROUP:
            steps.append(self._hydrating_serum_step())

        steps.append(RoutineStep(
            step_name="Night moisturize",
            product_category=self.config.NIGHT_MOISTURIZER_BY_TYPE[skin_type],
            rationale="Supports overnight repair and prevents water loss",
            time_of_day=self.config.PM,
            application_note="Apply as the final step of the evening routine",
            step_class=StepClass.MOISTURIZER
        ))
        return steps

    def _antioxidant_step(self, skin_type: str) -> RoutineStep:
        # 민감성은 비타민C 금기 -> 나이아신아마이드 대체
        if skin_type == SkinType.SENSITIVE.value:
            category = "Niacinamide brightening serum"
        else:
            category = "Vitamin C antioxidant serum"
        return RoutineStep(
            step_name="Brightening serum",
            product_category=category,
            rationale="Fades discoloration and boosts sunscreen's protection against free radicals",
            time_of_day=self.config.AM,
            application_note="Apply 3-4 drops to dry skin before moisturizer",
            step_class=StepClass.TREATMENT
        )

    def _hydrating_serum_step(self) -> RoutineStep:
        return RoutineStep(
            step_name="Hydrating serum",
            product_category="Hyaluronic acid serum",
            rationale="Draws water into the skin to relieve dehydration",
            time_of_day=self.config.AM_PM,
            application_note="Press into damp skin before moisturizer",
            step_class=StepClass.TREATMENT
        )

    def _bha_step(self, skin_type: str, alternate: bool) -> RoutineStep:
        frequency = self.config.ALTERNATING_NOTE if alternate else "Start 2-3 evenings a week, building to nightly as tolerated"
        # 건성은 살리실산 금기 -> 아젤라산 대체
        if skin_type == SkinType.DRY.value:
            return RoutineStep(
                step_name="Acne treatment",
                product_category="Azelaic acid 10% cream",
                rationale="Clears breakouts without over-drying the skin",
                time_of_day=self.config.PM,
                application_note=frequency,
                step_class=StepClass.TREATMENT
            )
        return RoutineStep(
            step_name="BHA treatment",
            product_category="Salicylic acid 2% exfoliant",
            rationale="Unclogs pores and reduces breakouts",
            time_of_day=self.config.PM,
            application_note=frequency,
            step_class=StepClass.TREATMENT
        )

    def _retinoid_step(self, skin_type: str, alternate: bool) -> RoutineStep:
        frequency = self.config.ALTERNATING_NOTE if alternate else "Start twice a week, increasing gradually to nightly"
        # 민감성은 레티놀 금기 -> 바쿠치올 대체
        if skin_type == SkinType.SENSITIVE.value:
            return RoutineStep(
                step_name="Retinoid alternative",
                product_category="Bakuchiol serum",
                rationale="Smooths fine lines with a gentler, retinol-like effect",
                time_of_day=self.config.PM,
                application_note=frequency,
                step_class=StepClass.TREATMENT
            )
        return RoutineStep(
            step_name="Retinol treatment",
            product_category="Retinol 0.3% serum",
            rationale="Stimulates collagen and accelerates cell turnover to soften lines",
            time_of_day=self.config.PM,
            application_note=frequency,
            step_class=StepClass.TREATMENT
        )
