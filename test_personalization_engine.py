#!/usr/bin/env python3
"""
개인화 엔진 구성요소 테스트
분류기, 고민 우선순위, 성분 추천, 루틴, 위험도, 예상 결과, 통합 시나리오
"""

import os
import sys

import pytest

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.config.scoring_config import Concerns, SkinTraits, ClassifierConfig
from app.models.personalization_models import (
    QuestionnaireResponse, SkinType, StepClass, TreatmentComplexity, Urgency,
    ClassificationError
)
from app.services.skin_type_classifier import SkinTypeClassifier
from app.services.concern_prioritizer import ConcernPrioritizer
from app.services.ingredient_recommender import IngredientRecommender
from app.services.routine_generator import RoutineGenerator
from app.services.risk_assessor import RiskAssessor, RiskContext
from app.services.outcome_predictor import OutcomePredictor
from app.services.insight_generator import InsightGenerator
from app.services.personalization_engine import PersonalizationEngine

OILY_SCALES = {
    "oiliness": 8, "dryness": 2, "sensitivity": 3, "breakouts": 7,
    "aging_signs": 1, "pore_size": 7, "pigmentation": 2
}

SENSITIVE_SCALES = {
    "oiliness": 2, "dryness": 2, "sensitivity": 9, "breakouts": 2,
    "aging_signs": 2, "pore_size": 2, "pigmentation": 2
}

DRY_SCALES = {
    "oiliness": 1, "dryness": 9, "sensitivity": 6, "breakouts": 3,
    "aging_signs": 7, "pore_size": 3, "pigmentation": 4
}

COMBINATION_SCALES = {
    "oiliness": 8, "dryness": 2, "sensitivity": 4, "breakouts": 5,
    "aging_signs": 3, "pore_size": 6, "pigmentation": 3
}

def make_response(scales=None, concerns=None, **kwargs) -> QuestionnaireResponse:
    return QuestionnaireResponse.from_answers(
        scale_answers=scales or {}, selected_concerns=concerns or [], **kwargs
    )

# === 피부 타입 분류 ===

def test_all_midpoint_scales_classify_as_normal():
    response = make_response({trait: 5 for trait in SkinTraits.ALL})
    result = SkinTypeClassifier().classify(response)

    assert result.type == SkinType.NORMAL
    assert result.score_per_type["normal"] == 10.0

def test_missing_scales_default_to_midpoint():
    assert SkinTypeClassifier().classify(make_response()).type == SkinType.NORMAL

def test_oily_scales_classify_as_oily():
    result = SkinTypeClassifier().classify(make_response(OILY_SCALES))

    assert result.type == SkinType.OILY
    assert result.score_per_type["oily"] == pytest.approx(9.1)
    assert result.score_per_type["normal"] == pytest.approx(7.2)
    # 2위는 복합성 8.5
    assert result.score_per_type["combination"] == pytest.approx(8.5)
    assert result.confidence == pytest.approx(0.7168)

@pytest.mark.parametrize("scales, expected", [
    ({trait: 5 for trait in SkinTraits.ALL}, SkinType.NORMAL),
    (OILY_SCALES, SkinType.OILY),
    (DRY_SCALES, SkinType.DRY),
    (COMBINATION_SCALES, SkinType.COMBINATION),
    (SENSITIVE_SCALES, SkinType.SENSITIVE),
])
def test_each_skin_type_reachable(scales, expected):
    result = SkinTypeClassifier().classify(make_response(scales))

    assert result.type == expected
    assert result.score_per_type[expected.value] == max(result.score_per_type.values())

def test_oil_dry_split_with_middling_traits_is_combination():
    # 유분 8 / 건조 2, 나머지 미응답(5)
    result = SkinTypeClassifier().classify(make_response({"oiliness": 8, "dryness": 2}))

    assert result.type == SkinType.COMBINATION
    assert result.score_per_type["combination"] == pytest.approx(8.5)
    assert result.score_per_type["oily"] == pytest.approx(8.1)

def test_small_oil_dry_gap_uses_low_combination_score():
    result = SkinTypeClassifier().classify(make_response({"oiliness": 6, "dryness": 3}))

    assert result.score_per_type["combination"] == pytest.approx(2.55)
    assert result.type != SkinType.COMBINATION

@pytest.mark.parametrize("value", [0, 3, 5, 7, 10])
def test_confidence_within_bounds(value):
    for trait in SkinTraits.ALL:
        scales = {t: 5 for t in SkinTraits.ALL}
        scales[trait] = value
        result = SkinTypeClassifier().classify(make_response(scales))
        assert 0.70 <= result.confidence <= 0.98

def test_type_is_argmax_of_scores():
    for scales in (OILY_SCALES, SENSITIVE_SCALES, {"dryness": 10, "oiliness": 0}):
        result = SkinTypeClassifier().classify(make_response(scales))
        assert result.score_per_type[result.type.value] == max(result.score_per_type.values())

def test_tie_break_follows_documented_order():
    class TiedConfig(ClassifierConfig):
        TYPE_WEIGHTS = {
            "oily": {SkinTraits.OILINESS: 1.0},
            "dry": {SkinTraits.DRYNESS: 1.0},
            "sensitive": {SkinTraits.SENSITIVITY: 1.0},
        }

    # 유분/건조/민감 모두 10 -> 세 타입 동점
    response = make_response({"oiliness": 10, "dryness": 10, "sensitivity": 10})
    result = SkinTypeClassifier(config=TiedConfig).classify(response)

    assert result.type == SkinType.OILY
    assert result.confidence == ClassifierConfig.CONFIDENCE_FLOOR

def test_confidence_clamped_at_ceiling():
    assert SkinTypeClassifier().calculate_confidence(30.0, 0.0) == 0.98
    assert SkinTypeClassifier().calculate_confidence(1.0, 1.0) == 0.70

def test_empty_type_table_raises_classification_error():
    class EmptyConfig(ClassifierConfig):
        SKIN_TYPES = []

    with pytest.raises(ClassificationError):
        SkinTypeClassifier(config=EmptyConfig).classify(make_response())

# === 고민 우선순위 ===

def test_acne_ranked_before_fine_lines():
    response = make_response(
        {"breakouts": 9, "oiliness": 8, "aging_signs": 2},
        [Concerns.FINE_LINES, Concerns.ACNE]
    )
    priority = ConcernPrioritizer().prioritize(response)

    assert priority.concerns == [Concerns.ACNE, Concerns.FINE_LINES]
    assert priority.ranked[0].priority_score == pytest.approx(6.0)
    assert priority.ranked[1].priority_score == pytest.approx(2.0)
    assert priority.ranked[0].urgency == Urgency.CRITICAL

def test_prioritizer_output_is_permutation_and_stable():
    concerns = [Concerns.LARGE_PORES, Concerns.ACNE, "Mystery concern", Concerns.DULLNESS]
    # 여드름/모공 모두 0.4*7 + 0.3*8 = 5.2 동점
    response = make_response(OILY_SCALES, concerns)
    priority = ConcernPrioritizer().prioritize(response)

    assert sorted(priority.concerns) == sorted(concerns)
    assert priority.concerns[:2] == [Concerns.LARGE_PORES, Concerns.ACNE]
    scores = [c.priority_score for c in priority.ranked]
    assert scores == sorted(scores, reverse=True)

def test_unknown_concern_gets_default_priority():
    priority = ConcernPrioritizer().prioritize(make_response(concerns=["Freckles"]))

    assert priority.ranked[0].priority_score == 5.0
    assert priority.ranked[0].urgency == Urgency.LOW
    assert priority.ranked[0].is_known is False

@pytest.mark.parametrize("count, expected", [
    (0, TreatmentComplexity.SIMPLE),
    (2, TreatmentComplexity.SIMPLE),
    (3, TreatmentComplexity.MODERATE),
    (4, TreatmentComplexity.MODERATE),
    (5, TreatmentComplexity.COMPLEX),
])
def test_treatment_complexity_by_count(count, expected):
    assert ConcernPrioritizer().treatment_complexity(count) == expected

# === 성분 추천 ===

def test_sensitive_skin_never_gets_retinol():
    response = make_response(SENSITIVE_SCALES, [Concerns.FINE_LINES, Concerns.ACNE, Concerns.FIRMNESS])
    classification = SkinTypeClassifier().classify(response)
    priority = ConcernPrioritizer().prioritize(response)
    names = [rec.name for rec in IngredientRecommender().recommend(classification.type, priority)]

    assert classification.type == SkinType.SENSITIVE
    assert "Retinol" not in names
    assert "Glycolic Acid" not in names
    assert "Peptides" in names

def test_match_percent_integers_within_range():
    recommender = IngredientRecommender()
    priority = ConcernPrioritizer().prioritize(make_response(OILY_SCALES, Concerns.ALL))
    for skin_type in SkinType:
        for rec in recommender.recommend(skin_type, priority):
            assert isinstance(rec.match_percent, int)
            assert 0 <= rec.match_percent <= 98

def test_recommendations_top_six_sorted_descending():
    priority = ConcernPrioritizer().prioritize(make_response(OILY_SCALES, Concerns.ALL))
    recs = IngredientRecommender().recommend(SkinType.OILY, priority)

    assert len(recs) == 6
    percents = [rec.match_percent for rec in recs]
    assert percents == sorted(percents, reverse=True)

def test_no_concerns_no_recommendations():
    priority = ConcernPrioritizer().prioritize(make_response(OILY_SCALES))
    assert IngredientRecommender().recommend(SkinType.OILY, priority) == []

def test_generated_rationale_when_no_fixed_text():
    priority = ConcernPrioritizer().prioritize(
        make_response(OILY_SCALES, [Concerns.ACNE, Concerns.EXCESS_OIL, Concerns.LARGE_PORES])
    )
    recs = {rec.name: rec for rec in IngredientRecommender().recommend(SkinType.OILY, priority)}

    # 우선순위 순: 과다 피지(5.4) > 여드름(5.2) = 모공(5.2)
    assert recs["Zinc PCA"].rationale == (
        f"Targets {Concerns.EXCESS_OIL}, {Concerns.ACNE} and {Concerns.LARGE_PORES}"
    )
    assert IngredientRecommender.generate_rationale([Concerns.ACNE]) == f"Targets {Concerns.ACNE}"

# === 루틴 ===

@pytest.mark.parametrize("skin_type", list(SkinType))
def test_routine_starts_with_cleanser_and_ends_with_moisturizer(skin_type):
    priority = ConcernPrioritizer().prioritize(make_response(concerns=Concerns.ALL))
    routine = RoutineGenerator().generate(skin_type, priority)

    for steps in (routine.morning, routine.evening):
        assert steps[0].step_class == StepClass.CLEANSER
        assert steps[-1].step_class == StepClass.MOISTURIZER

def test_bha_and_retinol_alternate_nights():
    priority = ConcernPrioritizer().prioritize(make_response(concerns=[Concerns.ACNE, Concerns.FINE_LINES]))
    routine = RoutineGenerator().generate(SkinType.OILY, priority)
    evening = {step.step_name: step for step in routine.evening}

    assert "BHA treatment" in evening
    assert "Retinol treatment" in evening
    assert evening["BHA treatment"].application_note == evening["Retinol treatment"].application_note

def test_morning_routine_without_pigmentation_has_no_serum():
    priority = ConcernPrioritizer().prioritize(make_response(concerns=[Concerns.ACNE]))
    routine = RoutineGenerator().generate(SkinType.NORMAL, priority)

    assert [step.step_name for step in routine.morning] == ["Cleanse", "Moisturize", "Protect"]

# === 위험도 / 예상 결과 ===

def test_three_actives_raise_risk_and_conflict():
    context = RiskContext(
        ingredient_names=["Retinol", "Salicylic Acid", "Glycolic Acid"],
        skin_type=SkinType.NORMAL
    )
    risk = RiskAssessor().assess(context)

    assert risk.over_treatment_risk >= 30
    assert risk.ingredient_conflicts

def test_sensitive_alerts_for_retinol_and_salicylic():
    context = RiskContext(
        ingredient_names=["Retinol", "Salicylic Acid"],
        skin_type=SkinType.SENSITIVE
    )
    risk = RiskAssessor().assess(context)

    assert len(risk.sensitivity_alerts) == 2

def test_pregnancy_preference_flags_retinol():
    context = RiskContext(
        ingredient_names=["Retinol", "Niacinamide"],
        skin_type=SkinType.NORMAL,
        preferences=frozenset({"Pregnancy-safe"})
    )
    risk = RiskAssessor().assess(context)

    assert any("pregnan" in conflict.lower() for conflict in risk.ingredient_conflicts)

def test_gentle_set_has_no_warnings():
    risk = RiskAssessor().assess(RiskContext(["Niacinamide", "Ceramides"], SkinType.DRY))

    assert risk.over_treatment_risk == 0
    assert not risk.has_warnings

def test_hyaluronic_acid_adds_week_one_statement():
    with_ha = OutcomePredictor().predict(["Hyaluronic Acid"])
    without = OutcomePredictor().predict([])

    assert len(with_ha.week_1) == len(without.week_1) + 1

# === 인사이트 ===

def test_mature_humid_insights():
    response = make_response(
        OILY_SCALES, [Concerns.ACNE],
        demographics=["40-49"], environment_factors=["Humid climate"]
    )
    tips = InsightGenerator().skin_recommendations(response, "oily")

    assert len(tips) == 7

def test_personalization_score_bounds():
    generator = InsightGenerator()
    classifier = SkinTypeClassifier()
    for response in (make_response(), make_response(OILY_SCALES, Concerns.ALL)):
        score = generator.personalization_score(response, classifier.classify(response))
        assert 0 <= score <= 100

# === 통합 ===

def test_end_to_end_oily_scenario():
    response = make_response(OILY_SCALES, [Concerns.ACNE, Concerns.LARGE_PORES])
    profile = PersonalizationEngine().analyze(response)

    assert profile.skin_type.type == SkinType.OILY
    names = profile.recommended_ingredient_names
    assert "Salicylic Acid" in names
    assert "Niacinamide" in names
    assert names[0] == "Salicylic Acid"
    assert profile.ingredient_recommendations[0].match_percent == 97
    assert "BHA treatment" in [step.step_name for step in profile.routine.evening]
    assert profile.products_enriched is False

def test_engine_is_idempotent():
    response = make_response(
        OILY_SCALES, [Concerns.ACNE, Concerns.DARK_SPOTS, Concerns.FINE_LINES],
        preferences=["Pregnancy-safe"], goals=["Long-term skin health"]
    )
    engine = PersonalizationEngine()

    assert engine.analyze(response).to_dict() == engine.analyze(response).to_dict()

def test_engine_tolerates_empty_input():
    profile = PersonalizationEngine().analyze(QuestionnaireResponse())

    assert profile.skin_type.type == SkinType.NORMAL
    assert profile.ingredient_recommendations == ()
    assert profile.ai_insights

def test_scale_values_are_clamped():
    response = make_response({"oiliness": 14, "dryness": -3})

    assert response.scale("oiliness") == 10
    assert response.scale("dryness") == 0
