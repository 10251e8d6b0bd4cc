#!/usr/bin/env python3
"""Tests for nearest-swara classification"""

import math
from fractions import Fraction

import pytest

from errors import EmptyScale
from swara_classifier import classify, nearest_swara, tolerance_for
from swara_scale import Scale, Swara, generate_scale


class TestClassify:

    def test_near_pa_matches(self, scale_240):
        match = classify(362, scale_240, 240)
        assert match is not None
        assert match.name == 'Pa'
        assert match.delta == pytest.approx(2.0)

    def test_far_from_every_swara_is_no_match(self, scale_240):
        assert classify(500, scale_240, 240) is None

    def test_nearest_still_reported_without_match(self, scale_240):
        swara, delta = nearest_swara(500, scale_240)
        assert swara.name == 'Ni'
        assert delta == pytest.approx(44.375)

    def test_exact_swara(self, scale_240):
        match = classify(240.0, scale_240, 240)
        assert match.name == 'Sa'
        assert match.delta == 0.0
        assert match.cents == 0.0

    def test_negative_delta_when_flat(self, scale_240):
        match = classify(355.0, scale_240, 240)
        assert match.name == 'Pa'
        assert match.delta == pytest.approx(-5.0)
        assert match.cents < 0

    def test_cents(self, scale_240):
        match = classify(362, scale_240, 240)
        assert match.cents == pytest.approx(1200 * math.log2(362 / 360))

    def test_tolerance_is_strict(self):
        scale = generate_scale(250)          # tolerance 20 Hz, Ni 474.609375
        assert tolerance_for(250) == pytest.approx(20.0)
        assert classify(474.609375 + 20.0, scale, 250) is None
        assert classify(474.609375 + 19.890625, scale, 250).name == 'Ni'

    def test_tolerance_uses_given_base(self, scale_240):
        # 10 Hz off Sa: inside 8% of 240, outside 8% of 100
        assert classify(250.0, scale_240, 240) is not None
        assert classify(230.0, scale_240, 100) is None

    def test_matched_swara_belongs_to_scale(self, scale_240):
        for f in range(80, 801, 7):
            match = classify(float(f), scale_240, 240)
            if match is not None:
                assert match.swara in scale_240

    def test_non_finite_frequency(self, scale_240):
        assert classify(math.nan, scale_240, 240) is None
        assert classify(math.inf, scale_240, 240) is None


class TestTies:

    def test_lowest_index_wins_exact_tie(self):
        scale = Scale(base_frequency=100.0, swaras=(
            Swara('Sa', Fraction(1, 1), 100.0),
            Swara('Pa', Fraction(3, 2), 150.0),
        ))
        swara, delta = nearest_swara(125.0, scale)
        assert swara.name == 'Sa'
        assert delta == 25.0

    def test_works_on_plain_sequences(self, scale_240):
        swara, _ = nearest_swara(300.0, list(scale_240))
        assert swara.name == 'Ga'


class TestEmptyScale:

    def test_classify_raises(self):
        with pytest.raises(EmptyScale):
            classify(300.0, Scale(base_frequency=240.0, swaras=()), 240)

    def test_nearest_raises_on_list(self):
        with pytest.raises(EmptyScale):
            nearest_swara(300.0, [])
