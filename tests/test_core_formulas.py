"""
Formula-focused unit tests for the core engine pieces.

Each test checks one rule of the summarizer, plateau detector,
classifier, variation ladder, or reward estimator.  Expected values are
hand-computed from the rules so the tests double as documentation.
"""

import pytest

from pushup_autoscale.core.config import (
    DEFAULT_TUNING,
    DIVISION_MULT,
    INTENSITY_MULT,
    VARIATION_LADDER,
    VARIATION_MULT,
)
from pushup_autoscale.core.models import (
    InjuryFlags,
    PerformanceSummary,
    PlanTemplate,
    ProgressionStatus,
    SessionLog,
    SetLog,
    UserState,
)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _set(actual: int, target: int = 10, rir: float | None = None, failed: bool = False) -> SetLog:
    return SetLog(target_reps=target, actual_reps=actual, rir=rir, failed=failed)


def _session(
    date: str,
    reps: list[int],
    *,
    target: int = 10,
    rir: float | None = None,
    failed: bool = False,
    template_id: str | None = "t1",
    pain: bool = False,
) -> SessionLog:
    return SessionLog(
        date=date,
        session_id=f"s-{date}",
        variation="Standard",
        sets=[_set(r, target=target, rir=rir, failed=failed) for r in reps],
        template_id=template_id,
        pain_reported=pain,
    )


def _template(sets: int = 4, reps: int = 10, **kwargs) -> PlanTemplate:
    params = dict(
        template_id="t1",
        day_label="Day 1",
        intensity="medium",
        variation="Standard",
        sets=sets,
        target_reps=reps,
        rest_seconds=75,
    )
    params.update(kwargs)
    return PlanTemplate(**params)


def _user(**kwargs) -> UserState:
    params = dict(user_id="u1", division="Warrior", goal="Mixed", baseline_max=30, readiness=0.8)
    params.update(kwargs)
    return UserState(**params)


def _summary(
    avg_rir: float | None = 3.0,
    completion: float = 1.0,
    fail: float = 0.0,
) -> PerformanceSummary:
    return PerformanceSummary(
        avg_rir=avg_rir,
        completion_rate=completion,
        fail_rate=fail,
        total_target=0,
        total_actual=0,
    )


# ===========================================================================
# metrics.py: clamp / round_half_up / mean
# ===========================================================================

class TestBasicHelpers:

    def test_clamp_inside_range_is_identity(self):
        from pushup_autoscale.core.metrics import clamp
        assert clamp(5, 1, 10) == 5

    def test_clamp_bounds(self):
        from pushup_autoscale.core.metrics import clamp
        assert clamp(-3, 0, 1) == 0
        assert clamp(7, 0, 1) == 1

    def test_round_half_up_rounds_halves_up(self):
        from pushup_autoscale.core.metrics import round_half_up
        assert round_half_up(8.5) == 9
        assert round_half_up(10.5) == 11
        assert round_half_up(8.49) == 8

    def test_mean_empty_is_zero(self):
        from pushup_autoscale.core.metrics import mean
        assert mean([]) == 0.0
        assert mean([1, 2, 3]) == pytest.approx(2.0)


# ===========================================================================
# metrics.py: RIR inference
# ===========================================================================

class TestInferRir:
    """gap >= 6 -> 4, >= 4 -> 3, >= 2 -> 2, >= 0 -> 1, < 0 -> 0"""

    @pytest.mark.parametrize(
        "actual,expected",
        [(16, 4.0), (15, 3.0), (14, 3.0), (13, 2.0), (12, 2.0), (11, 1.0), (10, 1.0), (9, 0.0)],
    )
    def test_gap_lookup(self, actual, expected):
        from pushup_autoscale.core.metrics import infer_rir
        assert infer_rir(_set(actual, target=10)) == expected

    def test_reported_rir_wins_over_gap(self):
        from pushup_autoscale.core.metrics import infer_rir
        assert infer_rir(_set(20, target=10, rir=0)) == 0.0

    def test_reported_rir_clamped_to_scale(self):
        from pushup_autoscale.core.metrics import infer_rir
        assert infer_rir(_set(10, rir=12)) == 10.0
        assert infer_rir(_set(10, rir=-1)) == 0.0


# ===========================================================================
# metrics.py: summarize_recent_performance
# ===========================================================================

class TestSummarizeRecentPerformance:

    def test_empty_history_is_neutral(self):
        from pushup_autoscale.core.metrics import summarize_recent_performance
        s = summarize_recent_performance([], _template())
        assert s.avg_rir is None
        assert s.completion_rate == 1.0
        assert s.fail_rate == 0.0
        assert s.total_target == 0 and s.total_actual == 0

    def test_missed_target_counts_as_failed(self):
        from pushup_autoscale.core.metrics import summarize_recent_performance
        # 4 sets, one short of target -> fail 1/4, completion 3/4
        s = summarize_recent_performance([_session("2026-01-01", [10, 10, 10, 9])], _template())
        assert s.fail_rate == pytest.approx(0.25)
        assert s.completion_rate == pytest.approx(0.75)

    def test_failed_flag_counts_even_when_target_met(self):
        from pushup_autoscale.core.metrics import summarize_recent_performance
        session = SessionLog(
            date="2026-01-01", session_id="s1", variation="Standard",
            sets=[_set(10), _set(10, failed=True)],
        )
        s = summarize_recent_performance([session])
        assert s.fail_rate == pytest.approx(0.5)

    def test_completion_uses_template_sets_and_is_clamped(self):
        from pushup_autoscale.core.metrics import summarize_recent_performance
        # 8 logged sets, 1 failed, template plans 4 -> 7/4 clamped to 1
        history = [
            _session("2026-01-01", [10, 10, 10, 10]),
            _session("2026-01-03", [10, 10, 10, 8]),
        ]
        s = summarize_recent_performance(history, _template(sets=4))
        assert s.completion_rate == 1.0
        assert s.fail_rate == pytest.approx(1 / 8)

    def test_completion_without_template_uses_logged_sets(self):
        from pushup_autoscale.core.metrics import summarize_recent_performance
        history = [
            _session("2026-01-01", [10, 10, 10, 10]),
            _session("2026-01-03", [10, 10, 10, 8]),
        ]
        s = summarize_recent_performance(history)
        assert s.completion_rate == pytest.approx(7 / 8)

    def test_avg_rir_and_totals(self):
        from pushup_autoscale.core.metrics import summarize_recent_performance
        # gaps 5, 3, 2, 1 -> RIR 3, 2, 2, 1 -> mean 2.0
        history = [_session("2026-01-01", [20, 18, 17, 16], target=15)]
        s = summarize_recent_performance(history, _template(reps=15))
        assert s.avg_rir == pytest.approx(2.0)
        assert s.total_target == 60
        assert s.total_actual == 71

    def test_session_without_sets_yields_null_rir(self):
        from pushup_autoscale.core.metrics import summarize_recent_performance
        empty = SessionLog(date="2026-01-01", session_id="s1", variation="Standard")
        s = summarize_recent_performance([empty], _template())
        assert s.avg_rir is None
        assert s.fail_rate == 0.0
        assert s.completion_rate == 0.0


# ===========================================================================
# adaptation.py: has_pain
# ===========================================================================

class TestHasPain:

    def test_no_flags_no_report(self):
        from pushup_autoscale.core.adaptation import has_pain
        assert has_pain(_user(), _session("2026-01-01", [10])) is False

    def test_any_injury_flag(self):
        from pushup_autoscale.core.adaptation import has_pain
        user = _user(injury_flags=InjuryFlags(elbow_pain=True))
        assert has_pain(user, None) is True

    def test_all_false_flags_are_not_pain(self):
        from pushup_autoscale.core.adaptation import has_pain
        assert has_pain(_user(injury_flags=InjuryFlags()), None) is False

    def test_last_session_pain_report(self):
        from pushup_autoscale.core.adaptation import has_pain
        assert has_pain(_user(), _session("2026-01-01", [10], pain=True)) is True


# ===========================================================================
# adaptation.py: detect_plateau
# ===========================================================================

class TestDetectPlateau:
    """Plateau = no improvement AND mean RIR <= 1.1 AND no failed sets."""

    def _flat(self, totals_per_set: list[int]) -> list[SessionLog]:
        # Each session: 3 sets hitting target exactly (RIR 1).
        return [
            _session(f"2026-01-0{i + 1}", [r, r, r], target=r)
            for i, r in enumerate(totals_per_set)
        ]

    def test_too_few_sessions(self):
        from pushup_autoscale.core.adaptation import detect_plateau
        assert detect_plateau(self._flat([10, 10])) is False

    def test_flat_output_near_failure_is_plateau(self):
        from pushup_autoscale.core.adaptation import detect_plateau
        assert detect_plateau(self._flat([10, 10, 10])) is True

    def test_declining_output_is_plateau(self):
        from pushup_autoscale.core.adaptation import detect_plateau
        assert detect_plateau(self._flat([10, 11, 9])) is True

    def test_improvement_breaks_plateau(self):
        from pushup_autoscale.core.adaptation import detect_plateau
        assert detect_plateau(self._flat([10, 10, 11])) is False

    def test_reserve_left_is_not_plateau(self):
        from pushup_autoscale.core.adaptation import detect_plateau
        history = [_session(f"2026-01-0{i}", [10, 10, 10], rir=3) for i in (1, 2, 3)]
        assert detect_plateau(history) is False

    def test_failed_set_is_not_plateau(self):
        from pushup_autoscale.core.adaptation import detect_plateau
        history = self._flat([10, 10])
        history.append(_session("2026-01-03", [10, 10, 10], failed=True))
        assert detect_plateau(history) is False

    def test_only_last_k_sessions_considered(self):
        from pushup_autoscale.core.adaptation import detect_plateau
        # An old improvement outside the window does not matter.
        history = self._flat([5, 10, 10, 10])
        assert detect_plateau(history, k=3) is True

    def test_ignores_template_ids(self):
        from pushup_autoscale.core.adaptation import detect_plateau
        history = [
            _session("2026-01-01", [10, 10], template_id="a"),
            _session("2026-01-02", [10, 10], template_id="b"),
            _session("2026-01-03", [10, 10], template_id=None),
        ]
        assert detect_plateau(history) is True

    def test_window_without_sets_defaults_rir_to_one(self):
        from pushup_autoscale.core.adaptation import detect_plateau
        history = [
            SessionLog(date=f"2026-01-0{i}", session_id=str(i), variation="Standard")
            for i in (1, 2, 3)
        ]
        assert detect_plateau(history) is True


# ===========================================================================
# adaptation.py: classify_progression
# ===========================================================================

class TestClassifyProgression:

    def test_pain_overrides_perfect_evidence(self):
        from pushup_autoscale.core.adaptation import classify_progression
        assert classify_progression(_summary(avg_rir=5), 1.0, pain=True) is ProgressionStatus.REGRESS

    def test_fail_rate_threshold_is_inclusive(self):
        from pushup_autoscale.core.adaptation import classify_progression
        status = classify_progression(_summary(fail=0.25), 0.9, pain=False)
        assert status is ProgressionStatus.REGRESS

    def test_fail_rate_just_below_threshold(self):
        from pushup_autoscale.core.adaptation import classify_progression
        status = classify_progression(_summary(fail=0.24), 0.9, pain=False)
        assert status is ProgressionStatus.PROMOTE

    def test_low_completion_regresses(self):
        from pushup_autoscale.core.adaptation import classify_progression
        status = classify_progression(_summary(completion=0.84), 0.9, pain=False)
        assert status is ProgressionStatus.REGRESS

    def test_all_promotion_conditions(self):
        from pushup_autoscale.core.adaptation import classify_progression
        status = classify_progression(_summary(avg_rir=3.0, completion=0.95), 0.65, pain=False)
        assert status is ProgressionStatus.PROMOTE

    @pytest.mark.parametrize(
        "avg_rir,completion,readiness",
        [(2.9, 1.0, 0.9), (4.0, 0.94, 0.9), (4.0, 1.0, 0.64)],
    )
    def test_one_missed_promotion_condition_holds(self, avg_rir, completion, readiness):
        from pushup_autoscale.core.adaptation import classify_progression
        status = classify_progression(_summary(avg_rir=avg_rir, completion=completion), readiness, pain=False)
        assert status is ProgressionStatus.HOLD

    def test_null_rir_treated_as_one(self):
        from pushup_autoscale.core.adaptation import classify_progression
        status = classify_progression(_summary(avg_rir=None), 1.0, pain=False)
        assert status is ProgressionStatus.HOLD

    def test_custom_tuning_threshold(self):
        import dataclasses
        from pushup_autoscale.core.adaptation import classify_progression
        lenient = dataclasses.replace(DEFAULT_TUNING, promote_avg_rir=1.0)
        status = classify_progression(_summary(avg_rir=None), 1.0, pain=False, tuning=lenient)
        assert status is ProgressionStatus.PROMOTE


# ===========================================================================
# variations.py: ladder
# ===========================================================================

class TestVariationLadder:

    def test_ladder_order(self):
        assert VARIATION_LADDER[0] == "Knee"
        assert VARIATION_LADDER[-1] == "PseudoPlanche"
        assert len(VARIATION_LADDER) == 12

    def test_easier_steps_down(self):
        from pushup_autoscale.core.variations import easier_variation
        assert easier_variation("Standard") == "Incline"
        assert easier_variation("Archer") == "Explosive"

    def test_easier_clamps_at_bottom(self):
        from pushup_autoscale.core.variations import easier_variation
        assert easier_variation("Knee") == "Knee"

    def test_easier_unknown_drops_to_bottom(self):
        from pushup_autoscale.core.variations import easier_variation
        assert easier_variation("Pike") == "Knee"

    def test_harder_steps_up(self):
        from pushup_autoscale.core.variations import harder_variation
        assert harder_variation("Standard") == "Wide"

    def test_harder_clamps_at_top(self):
        from pushup_autoscale.core.variations import harder_variation
        assert harder_variation("PseudoPlanche") == "PseudoPlanche"

    def test_harder_unknown_is_unchanged(self):
        from pushup_autoscale.core.variations import harder_variation
        assert harder_variation("Pike") == "Pike"

    def test_aliases_are_normalized(self):
        from pushup_autoscale.core.variations import (
            easier_variation,
            harder_variation,
            normalize_variation_name,
        )
        assert normalize_variation_name("Hand-Release") == "HandRelease"
        assert harder_variation("Hand Release") == "Tempo"
        assert easier_variation("Pseudo-Planche") == "Archer"
        assert harder_variation("Pseudo Planche") == "PseudoPlanche"


# ===========================================================================
# rewards.py
# ===========================================================================

class TestRewards:

    def test_multiplier_tables(self):
        assert DIVISION_MULT == {"Rookie": 1.0, "Warrior": 1.25, "Elite": 1.5}
        assert INTENSITY_MULT == {"easy": 0.9, "medium": 1.0, "hard": 1.1, "boss": 1.25}
        assert VARIATION_MULT["Knee"] == 0.75
        assert VARIATION_MULT["PseudoPlanche"] == 1.50

    def test_get_multipliers_normalizes_variation(self):
        from pushup_autoscale.core.rewards import get_multipliers
        m = get_multipliers("Elite", "Pseudo Planche", "boss")
        assert m == {"division": 1.5, "variation": 1.5, "intensity": 1.25, "streak": 1.0}

    def test_unknown_variation_scores_one(self):
        from pushup_autoscale.core.rewards import get_multipliers
        assert get_multipliers("Rookie", "Clap", "medium")["variation"] == 1.0

    def test_off_ladder_variation_keeps_its_multiplier(self):
        from pushup_autoscale.core.rewards import get_multipliers
        assert get_multipliers("Rookie", "Pike", "medium")["variation"] == pytest.approx(1.30)

    def test_estimate_reward(self):
        from pushup_autoscale.core.rewards import estimate_reward
        # 40 reps x 1.25 (Warrior) x 1.0 x 1.0 = 50
        r = estimate_reward([10, 10, 10, 10], "Warrior", "Standard", "medium")
        assert r.estimated_reward == 50
        assert r.base_reward_per_rep == 1
        assert r.multipliers["streak"] == 1.0

    def test_estimate_reward_rounds(self):
        from pushup_autoscale.core.rewards import estimate_reward
        # 10 reps x 1.0 x 1.05 (Wide) x 1.1 (hard) = 11.55 -> 12
        r = estimate_reward([10], "Rookie", "Wide", "hard")
        assert r.estimated_reward == 12

    def test_empty_prescription_scores_zero(self):
        from pushup_autoscale.core.rewards import estimate_reward
        assert estimate_reward([], "Elite", "Archer", "boss").estimated_reward == 0


# ===========================================================================
# planner.py: promotion step / safety cap / comparable sessions
# ===========================================================================

class TestPlannerFormulas:

    def test_promotion_step_scales_with_readiness(self):
        from pushup_autoscale.core.planner import promotion_step
        assert promotion_step(0.0) == pytest.approx(0.07 * 0.8)
        assert promotion_step(1.0) == pytest.approx(0.07 * 1.2)

    def test_promotion_step_capped(self):
        import dataclasses
        from pushup_autoscale.core.planner import promotion_step
        aggressive = dataclasses.replace(DEFAULT_TUNING, weekly_volume_step=0.5)
        assert promotion_step(1.0, aggressive) == pytest.approx(0.15)

    @pytest.mark.parametrize("baseline,cap", [(30, 25), (10, 8), (5, 8), (40, 34), (100, 85)])
    def test_safety_cap(self, baseline, cap):
        from pushup_autoscale.core.planner import safety_cap
        assert safety_cap(baseline) == cap

    def test_apply_safety_clamp_floors_at_one(self):
        from pushup_autoscale.core.planner import apply_safety_clamp
        assert apply_safety_clamp([0, 5, 50], 20) == [1, 5, 17]

    def test_comparable_sessions_filters_by_template(self):
        from pushup_autoscale.core.planner import comparable_sessions
        history = [
            _session("2026-01-01", [10], template_id="t1"),
            _session("2026-01-02", [10], template_id="other"),
            _session("2026-01-03", [10], template_id=None),
        ]
        result = comparable_sessions(history, _template())
        assert [s.date for s in result] == ["2026-01-01"]

    def test_comparable_sessions_without_template_id_takes_all(self):
        from pushup_autoscale.core.planner import comparable_sessions
        history = [_session(f"2026-01-0{i}", [10], template_id=None) for i in range(1, 9)]
        result = comparable_sessions(history, _template(template_id=""))
        # capped to the 6 most recent
        assert [s.date for s in result] == [f"2026-01-0{i}" for i in range(3, 9)]


# ===========================================================================
# history.py
# ===========================================================================

class TestHistoryHelpers:

    def test_recent_session_logs_skips_sessions_without_sets(self):
        from pushup_autoscale.core.history import recent_session_logs
        bare = SessionLog(date="2026-01-02", session_id="bare", variation="Standard")
        history = [_session("2026-01-01", [10]), bare, _session("2026-01-03", [10])]
        assert [s.date for s in recent_session_logs(history)] == ["2026-01-01", "2026-01-03"]

    def test_recent_session_logs_keeps_last_count(self):
        from pushup_autoscale.core.history import recent_session_logs
        history = [_session(f"2026-01-{i:02d}", [10]) for i in range(1, 13)]
        result = recent_session_logs(history, count=10)
        assert len(result) == 10
        assert result[0].date == "2026-01-03"

    def test_recent_session_logs_zero_count(self):
        from pushup_autoscale.core.history import recent_session_logs
        assert recent_session_logs([_session("2026-01-01", [10])], count=0) == []

    def test_template_history(self):
        from pushup_autoscale.core.history import template_history
        history = [
            _session("2026-01-01", [10], template_id="a"),
            _session("2026-01-02", [10], template_id="b"),
        ]
        assert [s.template_id for s in template_history(history, "b")] == ["b"]


# ===========================================================================
# models.py: validation
# ===========================================================================

class TestModelValidation:

    def test_baseline_max_must_be_positive(self):
        with pytest.raises(ValueError):
            _user(baseline_max=0)

    def test_unknown_division(self):
        with pytest.raises(ValueError):
            _user(division="Legend")

    def test_unknown_intensity(self):
        with pytest.raises(ValueError):
            _template(intensity="insane")

    def test_bad_session_date(self):
        with pytest.raises(ValueError):
            _session("2026-13-01", [10])

    def test_negative_reps(self):
        with pytest.raises(ValueError):
            SetLog(target_reps=10, actual_reps=-1)

    def test_session_sets_stored_as_tuple(self):
        s = _session("2026-01-01", [10, 9])
        assert isinstance(s.sets, tuple)
        assert s.total_actual_reps == 19

    def test_template_total_reps(self):
        assert _template(sets=5, reps=12).total_reps == 60

    def test_tuning_validation(self):
        from pushup_autoscale.core.config import EngineTuning
        with pytest.raises(ValueError):
            EngineTuning(plateau_sessions=1)
