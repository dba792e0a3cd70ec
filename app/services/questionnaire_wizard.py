"""
피부 분석 설문 위저드
단계별 응답 수집 상태 머신: Step0 ... StepN-1 -> Analyzing -> Complete
"""
from typing import List, Dict, Optional, Any, Tuple, Union
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from uuid import uuid4
import asyncio
import logging

from app.config.scoring_config import (
    SkinTraits, Concerns, InsightConfig, ProductMatchConfig, RiskConfig
)
from app.models.personalization_models import (
    QuestionnaireResponse, PersonalizedProfile, WizardTransitionError
)

logger = logging.getLogger(__name__)

MAX_SESSIONS = 1000

class StepKind(str, Enum):
    """설문 단계 응답 형식"""
    SCALE = "scale"
    SINGLE = "single"
    MULTIPLE = "multiple"

class WizardState(str, Enum):
    """위저드 상태"""
    STEP = "step"
    ANALYZING = "analyzing"
    COMPLETE = "complete"

@dataclass(frozen=True)
class AnalysisStep:
    """설문 단계 정의"""
    id: str
    title: str
    question: str
    kind: StepKind
    options: Tuple[str, ...] = ()

ANALYSIS_STEPS: Tuple[AnalysisStep, ...] = (
    AnalysisStep(
        id="skin-scales",
        title="Skin Characteristics",
        question="Rate each characteristic of your skin from 0 (not at all) to 10 (very strong)",
        kind=StepKind.SCALE,
        options=tuple(SkinTraits.ALL)
    ),
    AnalysisStep(
        id="concerns",
        title="Skin Concerns",
        question="What are your main skin concerns? (Select all that apply)",
        kind=StepKind.MULTIPLE,
        options=tuple(Concerns.ALL)
    ),
    AnalysisStep(
        id="environment",
        title="Environment",
        question="Which environmental factors affect your skin?",
        kind=StepKind.MULTIPLE,
        options=(
            "Humid climate", "Tropical climate", "Dry climate", "Cold climate",
            "Temperate climate", "High pollution", "Frequent sun exposure"
        )
    ),
    AnalysisStep(
        id="demographics",
        title="Age",
        question="What is your age range?",
        kind=StepKind.SINGLE,
        options=("Under 20", "20-29", "30-39", "40-49", "50+")
    ),
    AnalysisStep(
        id="routine-habits",
        title="Current Routine",
        question="Which best describes your skincare habits?",
        kind=StepKind.MULTIPLE,
        options=(
            ProductMatchConfig.MINIMAL_ROUTINE_HABIT, ProductMatchConfig.COMMITMENT_HABIT,
            "Occasional routine", "Wear makeup daily", "Exercise frequently"
        )
    ),
    AnalysisStep(
        id="goals",
        title="Skincare Goals",
        question="What do you want to achieve with your skincare routine?",
        kind=StepKind.MULTIPLE,
        options=(
            "Clear acne", "Prevent aging", "Brighten skin", "Hydrate skin",
            "Minimize pores", "Even skin tone", ProductMatchConfig.PATIENCE_GOAL
        )
    ),
    AnalysisStep(
        id="preferences",
        title="Product Preferences",
        question="Do you have any product preferences?",
        kind=StepKind.MULTIPLE,
        options=(
            ProductMatchConfig.SCIENCE_PREFERENCE, RiskConfig.PREGNANCY_SAFE_PREFERENCE,
            "Fragrance-free", "Vegan", "Cruelty-free", "No preference"
        )
    ),
)

AnswerValue = Union[Dict[str, int], str, List[str]]

class QuestionnaireWizard:
    """설문 위저드 (세션별 1개 인스턴스, Complete 이후 재사용 불가)"""

    def __init__(self, steps: Tuple[AnalysisStep, ...] = ANALYSIS_STEPS, session_id: Optional[str] = None):
        if not steps:
            raise ValueError("설문 단계가 비어 있습니다")
        self.session_id = session_id or str(uuid4())
        self.steps = steps
        self.state = WizardState.STEP
        self.current_index = 0
        self.answers: Dict[str, AnswerValue] = {}
        self.profile: Optional[PersonalizedProfile] = None

    @property
    def current_step(self) -> Optional[AnalysisStep]:
        """현재 단계 (Analyzing/Complete 상태면 None)"""
        if self.state != WizardState.STEP:
            return None
        return self.steps[self.current_index]

    @property
    def progress(self) -> int:
        """진행률 (%)"""
        if self.state != WizardState.STEP:
            return 100
        return int((self.current_index + 1) * 100 / len(self.steps))

    @property
    def is_last_step(self) -> bool:
        return self.current_index == len(self.steps) - 1

    def answer(self, value: AnswerValue) -> None:
        """
        현재 단계 응답 기록

        Raises:
            WizardTransitionError: 설문 단계가 아닌 상태에서 응답
            ValueError: 단계 형식/선택지와 맞지 않는 응답
        """
        step = self._require_step("answer")

        if step.kind == StepKind.SCALE:
            if not isinstance(value, dict):
                raise ValueError(f"'{step.id}' 단계는 척도 응답(dict)이 필요합니다")
            merged = dict(self.answers.get(step.id) or {})
            for trait, score in value.items():
                if trait not in step.options:
                    raise ValueError(f"알 수 없는 척도 항목: {trait}")
                if score is None:
                    merged.pop(trait, None)
                    continue
                if not SkinTraits.SCALE_MIN <= int(score) <= SkinTraits.SCALE_MAX:
                    raise ValueError(f"척도 값은 {SkinTraits.SCALE_MIN}-{SkinTraits.SCALE_MAX} 범위여야 합니다: {trait}={score}")
                merged[trait] = int(score)
            self.answers[step.id] = merged

        elif step.kind == StepKind.SINGLE:
            if not isinstance(value, str):
                raise ValueError(f"'{step.id}' 단계는 단일 선택 응답이 필요합니다")
            if value and value not in step.options:
                raise ValueError(f"선택지에 없는 응답: {value}")
            self.answers[step.id] = value

        else:
            if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
                raise ValueError(f"'{step.id}' 단계는 다중 선택 응답(list)이 필요합니다")
            unknown = [option for option in value if option not in step.options]
            if unknown:
                raise ValueError(f"선택지에 없는 응답: {', '.join(unknown)}")
            if len(set(value)) != len(value):
                raise ValueError(f"'{step.id}' 단계 선택지는 중복 선택할 수 없습니다")
            self.answers[step.id] = list(value)

    def can_proceed(self) -> bool:
        """현재 단계 응답 존재 여부"""
        step = self.current_step
        if step is None:
            return False

        answer = self.answers.get(step.id)
        if step.kind == StepKind.SCALE:
            return bool(answer) and all(trait in answer for trait in step.options)
        if step.kind == StepKind.SINGLE:
            return bool(answer)
        return bool(answer) and len(answer) > 0

    def next(self) -> WizardState:
        """
        다음 단계로 이동 (마지막 단계면 Analyzing)

        Raises:
            WizardTransitionError: 응답 누락 또는 설문 단계가 아닌 상태
        """
        step = self._require_step("next")
        if not self.can_proceed():
            raise WizardTransitionError(f"'{step.id}' 단계 응답이 완료되지 않았습니다")

        if self.is_last_step:
            self.state = WizardState.ANALYZING
            logger.info(f"🔬 설문 완료 - 분석 시작: {self.session_id}")
        else:
            self.current_index += 1
        return self.state

    def previous(self) -> WizardState:
        """이전 단계로 이동 (첫 단계에서는 그대로)"""
        self._require_step("previous")
        self.current_index = max(0, self.current_index - 1)
        return self.state

    async def complete_analysis(self, service, delay_seconds: float = 0.0) -> PersonalizedProfile:
        """
        Analyzing -> Complete 전환

        분석이 실패해도 Complete로 전환하고 (profile은 None) 예외는 호출자에게 전달

        Args:
            service: PersonalizationService
            delay_seconds: 결과 공개 전 대기 시간

        Returns:
            PersonalizedProfile: 분석 결과 (세션 ID로 저장)
        """
        if self.state != WizardState.ANALYZING:
            raise WizardTransitionError(f"분석 대기 상태가 아닙니다: {self.state.value}")

        try:
            if delay_seconds > 0:
                await asyncio.sleep(delay_seconds)
            self.profile = await service.analyze_and_store(self.to_response(), profile_key=self.session_id)
        except Exception as e:
            logger.error(f"❌ 분석 실패 - 결과 없이 완료 처리: {self.session_id} ({e})")
            raise
        finally:
            self.state = WizardState.COMPLETE

        logger.info(f"✅ 분석 완료: {self.session_id}")
        return self.profile

    def to_response(self) -> QuestionnaireResponse:
        """수집된 응답을 QuestionnaireResponse로 변환"""
        def _selected(step_id: str) -> List[str]:
            value = self.answers.get(step_id)
            if not value:
                return []
            if isinstance(value, str):
                return [value]
            return list(value)

        return QuestionnaireResponse.from_answers(
            scale_answers=self.answers.get("skin-scales") or {},
            selected_concerns=_selected("concerns"),
            environment_factors=_selected("environment"),
            demographics=_selected("demographics"),
            routine_habits=_selected("routine-habits"),
            goals=_selected("goals"),
            preferences=_selected("preferences"),
        )

    def snapshot(self) -> Dict[str, Any]:
        """API 응답용 상태"""
        step = self.current_step
        return {
            "session_id": self.session_id,
            "state": self.state.value,
            "step_index": self.current_index,
            "total_steps": len(self.steps),
            "progress": self.progress,
            "can_proceed": self.can_proceed(),
            "current_step": {
                "id": step.id,
                "title": step.title,
                "question": step.question,
                "kind": step.kind.value,
                "options": list(step.options),
                "answer": self.answers.get(step.id)
            } if step else None
        }

    def _require_step(self, action: str) -> AnalysisStep:
        if self.state != WizardState.STEP:
            raise WizardTransitionError(f"{self.state.value} 상태에서는 '{action}' 전환을 할 수 없습니다")
        return self.steps[self.current_index]

class WizardSessionManager:
    """메모리 기반 위저드 세션 관리 (최대 max_sessions개, 가장 오래 사용하지 않은 세션부터 제거)"""

    def __init__(self, steps: Tuple[AnalysisStep, ...] = ANALYSIS_STEPS, max_sessions: int = MAX_SESSIONS):
        self.steps = steps
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, QuestionnaireWizard] = OrderedDict()

    def start(self) -> QuestionnaireWizard:
        wizard = QuestionnaireWizard(self.steps)
        self._sessions[wizard.session_id] = wizard
        self._evict_if_needed()
        logger.debug(f"위저드 세션 시작: {wizard.session_id}")
        return wizard

    def get(self, session_id: str) -> Optional[QuestionnaireWizard]:
        wizard = self._sessions.get(session_id)
        if wizard is not None:
            self._sessions.move_to_end(session_id)  # LRU 업데이트
        return wizard

    def _evict_if_needed(self):
        while len(self._sessions) > self.max_sessions:
            oldest_id = next(iter(self._sessions))
            del self._sessions[oldest_id]
            logger.debug(f"위저드 세션 제거: {oldest_id}")

    def __len__(self) -> int:
        return len(self._sessions)
