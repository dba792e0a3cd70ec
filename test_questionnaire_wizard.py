#!/usr/bin/env python3
"""
설문 위저드 상태 머신 테스트
"""

import asyncio
import os
import sys

import pytest

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.config.scoring_config import Concerns, SkinTraits
from app.models.personalization_models import WizardTransitionError
from app.services.personalization_engine import PersonalizationService
from app.services.profile_repository import InMemoryProfileRepository
from app.services.questionnaire_wizard import (
    QuestionnaireWizard, WizardSessionManager, WizardState, ANALYSIS_STEPS, MAX_SESSIONS
)

FULL_ANSWERS = [
    {trait: 5 for trait in SkinTraits.ALL},
    [Concerns.ACNE, Concerns.DARK_SPOTS],
    ["Humid climate"],
    "30-39",
    ["Consistent twice-daily routine"],
    ["Clear acne", "Long-term skin health"],
    ["Science-backed"],
]

def answer_all(wizard: QuestionnaireWizard, stop_before_last: bool = False):
    for index, value in enumerate(FULL_ANSWERS):
        wizard.answer(value)
        if stop_before_last and index == len(FULL_ANSWERS) - 1:
            return
        wizard.next()

def test_answer_list_matches_steps():
    assert len(FULL_ANSWERS) == len(ANALYSIS_STEPS)

def test_next_requires_answer():
    wizard = QuestionnaireWizard()

    with pytest.raises(WizardTransitionError):
        wizard.next()
    assert wizard.current_index == 0

def test_scale_step_requires_every_trait():
    wizard = QuestionnaireWizard()
    wizard.answer({"oiliness": 6, "dryness": 3})

    assert wizard.can_proceed() is False
    wizard.answer({trait: 4 for trait in SkinTraits.ALL if trait not in ("oiliness", "dryness")})
    assert wizard.can_proceed() is True
    assert wizard.answers["skin-scales"]["oiliness"] == 6

def test_scale_answer_out_of_range_rejected():
    wizard = QuestionnaireWizard()

    with pytest.raises(ValueError):
        wizard.answer({"oiliness": 11})
    with pytest.raises(ValueError):
        wizard.answer({"shine": 5})

def test_multiple_select_rejects_unknown_options_and_empty_set():
    wizard = QuestionnaireWizard()
    wizard.answer(FULL_ANSWERS[0])
    wizard.next()

    with pytest.raises(ValueError):
        wizard.answer(["Not a concern"])
    wizard.answer([])
    assert wizard.can_proceed() is False

def test_previous_clamped_at_first_step():
    wizard = QuestionnaireWizard()
    wizard.previous()
    assert wizard.current_index == 0

    wizard.answer(FULL_ANSWERS[0])
    wizard.next()
    wizard.previous()
    assert wizard.current_index == 0
    assert wizard.can_proceed() is True

def test_final_next_enters_analyzing():
    wizard = QuestionnaireWizard()
    answer_all(wizard)

    assert wizard.state == WizardState.ANALYZING
    assert wizard.current_step is None
    assert wizard.progress == 100

def test_no_transitions_outside_step_states():
    wizard = QuestionnaireWizard()
    answer_all(wizard)

    with pytest.raises(WizardTransitionError):
        wizard.next()
    with pytest.raises(WizardTransitionError):
        wizard.previous()
    with pytest.raises(WizardTransitionError):
        wizard.answer(["Vegan"])

def test_complete_analysis_stores_profile():
    repository = InMemoryProfileRepository()
    service = PersonalizationService(profile_repository=repository)
    wizard = QuestionnaireWizard()
    answer_all(wizard)

    profile = asyncio.run(wizard.complete_analysis(service))

    assert wizard.state == WizardState.COMPLETE
    assert wizard.profile is profile
    assert profile.concern_priority.concerns[0] in (Concerns.ACNE, Concerns.DARK_SPOTS)
    assert asyncio.run(repository.load(wizard.session_id)) == profile.to_dict()

    with pytest.raises(WizardTransitionError):
        wizard.previous()
    with pytest.raises(WizardTransitionError):
        asyncio.run(wizard.complete_analysis(service))

def test_complete_analysis_requires_analyzing_state():
    wizard = QuestionnaireWizard()
    answer_all(wizard, stop_before_last=True)

    with pytest.raises(WizardTransitionError):
        asyncio.run(wizard.complete_analysis(PersonalizationService()))

def test_to_response_collects_answers():
    wizard = QuestionnaireWizard()
    answer_all(wizard)
    response = wizard.to_response()

    assert response.selected_concerns == (Concerns.ACNE, Concerns.DARK_SPOTS)
    assert response.demographics == frozenset({"30-39"})
    assert response.answered_trait_count == len(SkinTraits.ALL)

def test_session_manager_tracks_wizards():
    sessions = WizardSessionManager()
    first = sessions.start()
    second = sessions.start()

    assert first.session_id != second.session_id
    assert sessions.get(first.session_id) is first
    assert sessions.get("missing") is None
    assert len(sessions) == 2

def test_session_manager_evicts_least_recently_used():
    sessions = WizardSessionManager(max_sessions=3)
    started = [sessions.start() for _ in range(3)]

    # 첫 세션 조회 -> 최근 사용으로 갱신
    assert sessions.get(started[0].session_id) is started[0]
    sessions.start()
    sessions.start()

    assert len(sessions) == 3
    assert sessions.get(started[0].session_id) is started[0]
    assert sessions.get(started[1].session_id) is None
    assert sessions.get(started[2].session_id) is None

def test_session_manager_default_cap():
    sessions = WizardSessionManager()
    for _ in range(MAX_SESSIONS + 50):
        sessions.start()

    assert len(sessions) == MAX_SESSIONS

class ExplodingService:
    async def analyze_and_store(self, response, profile_key=None):
        raise RuntimeError("engine failure")

def test_failed_analysis_still_completes():
    wizard = QuestionnaireWizard()
    answer_all(wizard)

    with pytest.raises(RuntimeError):
        asyncio.run(wizard.complete_analysis(ExplodingService()))

    assert wizard.state == WizardState.COMPLETE
    assert wizard.profile is None
    with pytest.raises(WizardTransitionError):
        wizard.next()

def test_duplicate_selection_rejected():
    wizard = QuestionnaireWizard()
    wizard.answer(FULL_ANSWERS[0])
    wizard.next()

    with pytest.raises(ValueError):
        wizard.answer([Concerns.ACNE, Concerns.ACNE])
    assert wizard.can_proceed() is False
