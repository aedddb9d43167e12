"""Tests for family metadata and argument validation."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from copulagof.stats.methods.common.statistical import Correction
from copulagof.stats.schemes.copula_selection.core import (
    GofDesign,
    prepare_design,
    prepare_familyset,
    prepare_sample,
)
from copulagof.stats.schemes.copula_selection.families import (
    ALL_FAMILIES,
    NEGATIVE_TAU_FAMILIES,
    POSITIVE_TAU_FAMILIES,
    compatible_with_tau,
    family_name,
    n_params,
    rotations_of,
    with_rotations,
)


class TestFamilies:
    """Tests for the family catalog."""

    @pytest.mark.parametrize(
        "code", [2, 7, 8, 9, 10, 17, 20, 27, 30, 37, 40, 104, 134, 204, 234]
    )
    def test_two_parameter_families(self, code: int) -> None:
        assert n_params(code) == 2

    @pytest.mark.parametrize("code", [0, 1, 3, 4, 5, 6, 13, 14, 16, 23, 36])
    def test_one_parameter_families(self, code: int) -> None:
        assert n_params(code) == 1

    def test_rotation_blocks(self) -> None:
        assert rotations_of(4) == (4, 14, 24, 34)
        assert rotations_of(24) == (4, 14, 24, 34)
        assert rotations_of(-204) == (-204, -214, -224, -234)
        assert rotations_of(5) == (5,)

    def test_with_rotations_deduplicates_in_order(self) -> None:
        assert with_rotations([13, 1, 3]) == (3, 13, 23, 33, 1)

    def test_tau_compatibility(self) -> None:
        assert compatible_with_tau(3, 0.5)
        assert not compatible_with_tau(3, -0.5)
        assert compatible_with_tau(23, -0.5)
        assert compatible_with_tau(23, 0.0)
        assert {0, 1, 2, 5} <= POSITIVE_TAU_FAMILIES & NEGATIVE_TAU_FAMILIES

    def test_names(self) -> None:
        assert family_name(1) == "Gaussian"
        assert family_name(999) == "family 999"


class TestPrepareSample:
    """Tests for prepare_sample."""

    def test_returns_float_arrays(self) -> None:
        sample = prepare_sample([0.1, 0.5], [0.2, 0.9])
        assert sample.u1.dtype == np.float64
        assert sample.n_obs == 2
        assert sample.dropped == 0

    def test_drops_incomplete_rows_with_warning(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            sample = prepare_sample([0.1, np.nan, 0.5, 0.7], [0.2, 0.3, np.nan, 0.8])
        assert sample.n_obs == 2
        assert sample.dropped == 2
        np.testing.assert_allclose(sample.u1, [0.1, 0.7])
        assert "Only complete observations are used" in caplog.text

    @pytest.mark.parametrize(
        "u1,u2",
        [
            (None, [0.1, 0.2]),
            ([], []),
            ([0.1, 0.2], [0.1, 0.2, 0.3]),
            ([0.1], [0.2]),
            ([0.1, np.nan], [0.2, 0.3]),
            ([0.1, 1.2], [0.2, 0.3]),
            ([0.1, 0.2], [-0.1, 0.3]),
            ([[0.1, 0.2]], [[0.1, 0.2]]),
        ],
    )
    def test_rejects_invalid_input(self, u1, u2) -> None:
        with pytest.raises(ValueError):
            prepare_sample(u1, u2)

    def test_boundaries_are_allowed(self) -> None:
        assert prepare_sample([0.0, 1.0], [1.0, 0.0]).n_obs == 2

    def test_min_obs(self) -> None:
        assert prepare_sample([0.3], [0.4], min_obs=1).n_obs == 1


class TestPrepareFamilyset:
    """Tests for prepare_familyset."""

    def test_default_is_all_families(self) -> None:
        codes = prepare_familyset(None, tau=0.0)
        assert sorted(codes) == sorted(ALL_FAMILIES)
        assert prepare_familyset(None, rotations=False, tau=0.0) == ALL_FAMILIES

    def test_single_code(self) -> None:
        assert prepare_familyset(5, rotations=True) == (5,)

    def test_rotations_expand(self) -> None:
        assert prepare_familyset([1, 3], rotations=True) == (1, 3, 13, 23, 33)

    def test_without_rotations(self) -> None:
        assert prepare_familyset([1, 3], rotations=False) == (1, 3)

    def test_negative_codes_exclude(self) -> None:
        codes = prepare_familyset([-3, -4], rotations=True)
        assert 3 not in codes and 33 not in codes and 24 not in codes
        assert 1 in codes and 6 in codes
        assert len(codes) == len(ALL_FAMILIES) - 8

    def test_mixed_signs_rejected(self) -> None:
        with pytest.raises(ValueError, match="positive AND negative"):
            prepare_familyset([1, -3], rotations=False)

    def test_unknown_code_rejected(self) -> None:
        with pytest.raises(ValueError, match="not implemented"):
            prepare_familyset([1, 11])

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            prepare_familyset([])

    def test_tau_filters_families(self) -> None:
        assert prepare_familyset([1, 3], rotations=True, tau=0.5) == (1, 3, 13)
        assert prepare_familyset([1, 3], rotations=True, tau=-0.5) == (1, 23, 33)

    def test_no_family_for_tau_sign_rejected(self) -> None:
        with pytest.raises(ValueError, match="Kendall's tau"):
            prepare_familyset([3], rotations=False, tau=-0.4)

    def test_duplicates_removed(self) -> None:
        assert prepare_familyset([1, 5, 1], rotations=False) == (1, 5)


class TestDesign:
    """Tests for GofDesign and prepare_design."""

    def test_prepare_design_uses_sample_tau(self, sample) -> None:
        design = prepare_design(sample, familyset=[1, 3], correction="Akaike")
        assert design.familyset == (1, 3, 13)
        assert design.correction is Correction.AKAIKE
        assert design.n_obs == sample.n_obs

    @pytest.mark.parametrize("level", [0.0, 1.0, 2.0])
    def test_level_validated(self, level: float) -> None:
        with pytest.raises(ValueError):
            GofDesign(familyset=(1,), level=level)

    def test_duplicates_rejected(self) -> None:
        with pytest.raises(ValueError):
            GofDesign(familyset=(1, 1))

    def test_payload_roundtrip(self) -> None:
        design = GofDesign(familyset=(1, 3), correction=Correction.SCHWARZ, level=0.1)
        assert GofDesign.from_payload(design.to_payload()) == design
