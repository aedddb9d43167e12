"""Tests for the evaluator, the all-pairs driver and score aggregation."""

from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
import pytest

from copulagof.stats.methods.nonnested.core import Decision
from copulagof.stats.schemes.copula_selection.allpairs import compare_reference
from copulagof.stats.schemes.copula_selection.evaluator import (
    LOGLIK_SENTINEL,
    FamilyEvaluationError,
    FamilyRegistry,
    ModelEvaluator,
)
from copulagof.stats.schemes.copula_selection.score import ScoreMatrix, aggregate_score


class TestFamilyRegistry:
    """Tests for FamilyRegistry."""

    def test_defaults_hold_independence_only(self) -> None:
        assert FamilyRegistry.with_defaults().codes() == (0,)

    def test_register_and_get(self, fixed_family) -> None:
        fam = fixed_family(np.zeros(3))
        registry = FamilyRegistry().register(4, fam)
        assert registry.get(4) is fam
        assert 4 in registry

    def test_missing_family_raises_evaluation_error(self) -> None:
        with pytest.raises(FamilyEvaluationError) as info:
            FamilyRegistry().get(7)
        assert info.value.family == 7

    def test_missing(self) -> None:
        assert FamilyRegistry.with_defaults().missing([0, 1, 3]) == (1, 3)


class TestModelEvaluator:
    """Tests for ModelEvaluator."""

    def test_independence_loglik_is_zero(self, sample) -> None:
        evaluator = ModelEvaluator(FamilyRegistry.with_defaults())
        ll = evaluator.loglik(sample, 0)
        assert ll.shape == (sample.n_obs,)
        assert not ll.any()

    def test_fit_is_recorded(self, sample, copula_registry) -> None:
        fit = ModelEvaluator(copula_registry).evaluate(sample, 1)
        assert fit.family == 1
        assert len(fit.params) == 1
        assert 0.5 < fit.params[0] < 0.9
        assert fit.n_params == 1
        assert fit.loglik.sum() > 0

    def test_non_finite_values_are_clamped(self, sample, fixed_family) -> None:
        values = np.zeros(sample.n_obs)
        values[:3] = [np.nan, np.inf, -np.inf]
        registry = FamilyRegistry().register(1, fixed_family(values))
        fit = ModelEvaluator(registry).evaluate(sample, 1)
        assert np.isfinite(fit.loglik).all()
        np.testing.assert_array_equal(fit.loglik[:3], LOGLIK_SENTINEL)
        assert fit.n_clamped == 3

    def test_wrong_length_rejected(self, sample, fixed_family) -> None:
        registry = FamilyRegistry().register(1, fixed_family(np.zeros(5)))
        with pytest.raises(FamilyEvaluationError, match="5 values"):
            ModelEvaluator(registry).loglik(sample, 1)

    def test_family_exceptions_are_wrapped(self, sample, failing_family) -> None:
        registry = FamilyRegistry().register(3, failing_family)
        with pytest.raises(FamilyEvaluationError, match="ArithmeticError") as info:
            ModelEvaluator(registry).loglik(sample, 3)
        assert isinstance(info.value.__cause__, ArithmeticError)

    def test_n_params_follows_catalog(self) -> None:
        evaluator = ModelEvaluator(FamilyRegistry())
        assert evaluator.n_params(2) == 2
        assert evaluator.n_params(3) == 1


class TestCompareReference:
    """Tests for compare_reference."""

    def test_self_pair_is_absent(self, sample, ranked_registry) -> None:
        cmp = compare_reference(sample, 3, (1, 3, 5), ModelEvaluator(ranked_registry))
        assert cmp.candidates == (1, 3, 5)
        assert cmp.vuong[1].is_absent and cmp.clarke[1].is_absent
        assert not cmp.vuong[0].is_absent

    def test_results_are_index_aligned(self, sample, ranked_registry) -> None:
        cmp = compare_reference(sample, 3, (1, 3, 5), ModelEvaluator(ranked_registry))
        assert cmp.vuong[0].decision is Decision.FAVOR_SECOND
        assert cmp.vuong[2].decision is Decision.FAVOR_FIRST
        assert cmp.clarke[0].decision is Decision.FAVOR_SECOND
        assert cmp.clarke[2].decision is Decision.FAVOR_FIRST
        assert cmp.scores() == (0, 0)

    def test_best_family_wins_everything(self, sample, ranked_registry) -> None:
        cmp = compare_reference(sample, 1, (1, 3, 5), ModelEvaluator(ranked_registry))
        assert cmp.scores() == (2, 2)

    def test_parameter_counts(self, sample, ranked_logliks, fixed_family) -> None:
        good, middle, _ = ranked_logliks
        registry = (
            FamilyRegistry()
            .register(1, fixed_family(good))
            .register(2, fixed_family(middle, params=(0.5, 4.0)))
        )
        cmp = compare_reference(sample, 1, (1, 2), ModelEvaluator(registry))
        assert cmp.n_params == {1: 1, 2: 2}

    def test_reference_evaluated_once(self, sample, ranked_logliks, fixed_family) -> None:
        good, middle, bad = ranked_logliks
        ref = fixed_family(good)
        registry = (
            FamilyRegistry()
            .register(1, ref)
            .register(3, fixed_family(middle))
            .register(5, fixed_family(bad))
        )
        compare_reference(sample, 1, (1, 3, 5), ModelEvaluator(registry))
        assert ref.fit_calls == 1

    def test_failed_candidate_only_affects_its_cell(
        self, sample, ranked_registry, failing_family, caplog
    ) -> None:
        ranked_registry.register(4, failing_family)
        with caplog.at_level(logging.WARNING):
            cmp = compare_reference(
                sample, 1, (1, 3, 4, 5), ModelEvaluator(ranked_registry)
            )
        assert cmp.vuong[2].is_absent and cmp.clarke[2].is_absent
        assert 4 in cmp.errors
        assert cmp.scores() == (2, 2)
        assert "1 vs 4 skipped" in caplog.text

    def test_failed_reference_makes_column_absent(
        self, sample, ranked_registry, failing_family
    ) -> None:
        ranked_registry.register(4, failing_family)
        cmp = compare_reference(sample, 4, (1, 3, 4), ModelEvaluator(ranked_registry))
        assert cmp.fit is None
        assert all(r.is_absent for r in cmp.vuong + cmp.clarke)
        assert cmp.scores() == (None, None)

    def test_unregistered_candidate_is_absent(self, sample, ranked_registry) -> None:
        cmp = compare_reference(sample, 1, (1, 3, 6), ModelEvaluator(ranked_registry))
        assert cmp.vuong[2].is_absent
        assert 6 in cmp.errors

    def test_gaussian_beats_independence(self, sample, copula_registry) -> None:
        cmp = compare_reference(sample, 1, (0, 1), ModelEvaluator(copula_registry))
        assert cmp.vuong[0].decision is Decision.FAVOR_FIRST
        assert cmp.vuong[0].statistic > 3


class TestAggregateScore:
    """Tests for aggregate_score."""

    def test_wins_minus_losses(self) -> None:
        decisions = [
            Decision.FAVOR_FIRST,
            Decision.FAVOR_SECOND,
            Decision.FAVOR_FIRST,
            Decision.NONE,
            None,
        ]
        assert aggregate_score(decisions) == 1

    def test_ties_only(self) -> None:
        assert aggregate_score([Decision.NONE, None]) == 0

    def test_all_absent_is_undefined(self) -> None:
        assert aggregate_score([None]) is None
        assert aggregate_score([]) is None

    @pytest.mark.parametrize("k", [2, 3, 6])
    def test_bounds(self, k: int) -> None:
        wins = [Decision.FAVOR_FIRST] * (k - 1) + [None]
        losses = [Decision.FAVOR_SECOND] * (k - 1) + [None]
        assert aggregate_score(wins) == k - 1
        assert aggregate_score(losses) == -(k - 1)


class TestScoreMatrix:
    """Tests for ScoreMatrix."""

    def test_cells_start_undefined(self) -> None:
        matrix = ScoreMatrix((1, 3, 5))
        assert matrix.shape == (2, 3)
        assert matrix.column(3) == (None, None)
        assert np.isnan(matrix.values()).all()

    def test_set_and_read(self) -> None:
        matrix = ScoreMatrix((1, 3))
        matrix.set(3, "vuong", -1)
        matrix.set(3, "Clarke", 0)
        assert matrix.column(3) == (-1, 0)
        assert math.isnan(matrix.values()[0, 0])

    def test_unknown_cell_raises(self) -> None:
        with pytest.raises(KeyError):
            ScoreMatrix((1,)).set(2, "vuong", 0)
        with pytest.raises(KeyError):
            ScoreMatrix((1,)).set(1, "wald", 0)

    def test_duplicate_families_rejected(self) -> None:
        with pytest.raises(ValueError):
            ScoreMatrix((1, 1))

    def test_to_frame(self) -> None:
        matrix = ScoreMatrix((5, 1))
        matrix.set(5, "vuong", 1)
        matrix.set(5, "clarke", -1)
        frame = matrix.to_frame()
        assert list(frame.index) == ["Vuong", "Clarke"]
        assert list(frame.columns) == [5, 1]
        assert frame.loc["Vuong", 5] == 1
        assert frame.loc["Clarke", 5] == -1
        assert frame[1].isna().all()
        assert frame[5].dtype == pd.Int64Dtype()

    def test_equality(self) -> None:
        a, b = ScoreMatrix((1, 3)), ScoreMatrix((1, 3))
        a.set(1, "vuong", 1)
        assert a != b
        b.set(1, "vuong", 1)
        assert a == b
