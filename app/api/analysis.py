"""
피부 분석 API
설문 일괄 분석, 저장된 프로필 조회, 단계별 설문 위저드
"""
from fastapi import APIRouter, HTTPException, Request
import logging

from app.models.request import QuestionnaireRequest, WizardAnswerRequest
from app.models.response import PersonalizedProfileResponse, WizardStateResponse
from app.services.personalization_engine import PersonalizationService
from app.services.questionnaire_wizard import (
    QuestionnaireWizard, WizardSessionManager, WizardState
)
from app.utils.time_tracker import TimeTracker

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/analysis",
    tags=["analysis"]
)

def _service(request: Request) -> PersonalizationService:
    return request.app.state.personalization_service

def _sessions(request: Request) -> WizardSessionManager:
    return request.app.state.wizard_sessions

def _get_wizard(request: Request, session_id: str) -> QuestionnaireWizard:
    wizard = _sessions(request).get(session_id)
    if wizard is None:
        raise HTTPException(status_code=404, detail=f"설문 세션을 찾을 수 없습니다: {session_id}")
    return wizard

def _wizard_state(wizard: QuestionnaireWizard) -> WizardStateResponse:
    state = wizard.snapshot()
    if wizard.profile is not None:
        state["profile"] = wizard.profile.to_dict()
    return WizardStateResponse(**state)

@router.post("", response_model=PersonalizedProfileResponse)
async def analyze_skin(payload: QuestionnaireRequest, request: Request):
    """
    설문 응답 일괄 분석

    누락된 척도는 중간값(5)으로 처리하며, 카탈로그/저장소 오류가 있어도
    제품 매칭 없는 분석 결과를 반환
    """
    tracker = TimeTracker("analysis_api").start()

    profile = await _service(request).analyze_and_store(
        payload.to_response(), profile_key=payload.profile_key
    )
    tracker.step("analysis")

    metrics = tracker.finish()
    logger.info(
        f"피부 분석 완료: {profile.skin_type.type.value} "
        f"(제품 매칭 {len(profile.product_matches)}개, {metrics.total_ms:.2f}ms)"
    )
    logger.debug(f"📊 분석 API 단계별 시간: {metrics.to_dict()}")
    return profile.to_dict()

@router.get("/profiles/{profile_key}", response_model=PersonalizedProfileResponse)
async def get_profile(profile_key: str, request: Request):
    """저장된 최신 분석 프로필 조회"""
    profile = await _service(request).load_profile(profile_key)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"저장된 프로필이 없습니다: {profile_key}")
    return profile

@router.post("/sessions", response_model=WizardStateResponse, status_code=201)
async def start_session(request: Request):
    """설문 위저드 세션 시작"""
    wizard = _sessions(request).start()
    logger.info(f"설문 세션 시작: {wizard.session_id}")
    return _wizard_state(wizard)

@router.get("/sessions/{session_id}", response_model=WizardStateResponse)
async def get_session(session_id: str, request: Request):
    """설문 위저드 상태 조회"""
    return _wizard_state(_get_wizard(request, session_id))

@router.post("/sessions/{session_id}/answers", response_model=WizardStateResponse)
async def answer_step(session_id: str, payload: WizardAnswerRequest, request: Request):
    """현재 단계 응답 기록"""
    wizard = _get_wizard(request, session_id)
    try:
        wizard.answer(payload.value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _wizard_state(wizard)

@router.post("/sessions/{session_id}/next", response_model=WizardStateResponse)
async def next_step(session_id: str, request: Request):
    """
    다음 단계로 이동

    마지막 단계에서 호출하면 Analyzing -> Complete 까지 진행하고 분석 결과를 포함해 반환
    """
    wizard = _get_wizard(request, session_id)
    state = wizard.next()

    if state == WizardState.ANALYZING:
        await wizard.complete_analysis(
            _service(request),
            delay_seconds=request.app.state.settings.analysis_delay_seconds
        )
    return _wizard_state(wizard)

@router.post("/sessions/{session_id}/previous", response_model=WizardStateResponse)
async def previous_step(session_id: str, request: Request):
    """이전 단계로 이동 (첫 단계에서는 그대로)"""
    wizard = _get_wizard(request, session_id)
    wizard.previous()
    return _wizard_state(wizard)
