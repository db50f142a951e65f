"""Tests for the rate conversion helpers."""

import math
import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.rates import gross_up, real_return


class TestGrossUp:
    """Tests for gross_up."""

    @pytest.mark.parametrize("post_tax", [0.0, 1000.0, 87654.32])
    def test_zero_tax_rate_returns_same_amount(self, post_tax):
        assert gross_up(post_tax, 0.75, 0) == post_tax

    @pytest.mark.parametrize("post_tax", [0.0, 1000.0, 87654.32])
    def test_zero_taxable_portion_returns_same_amount(self, post_tax):
        assert gross_up(post_tax, 0, 0.25) == post_tax

    def test_typical_case(self):
        # 1000 / (1 - 0.75 * 0.25) = 1000 / 0.8125
        assert gross_up(1000, 0.75, 0.25) == pytest.approx(1230.77, abs=0.01)

    def test_fully_taxable_withdrawal(self):
        # 1000 / (1 - 0.30)
        assert gross_up(1000, 1.0, 0.30) == pytest.approx(1428.57, abs=0.01)

    def test_gross_amount_never_below_post_tax_for_valid_rates(self):
        assert gross_up(50000, 0.5, 0.2) > 50000

    def test_product_of_one_is_infinite(self):
        """No clamping: the degenerate configuration diverges instead of raising."""
        assert math.isinf(gross_up(1000, 1.0, 1.0))

    def test_product_above_one_is_negative(self):
        assert gross_up(1000, 1.0, 1.5) < 0


class TestRealReturn:
    """Tests for real_return."""

    def test_nominal_minus_inflation(self):
        assert real_return(0.06, 0.025) == pytest.approx(0.035)

    def test_zero_when_nominal_equals_inflation(self):
        assert real_return(0.03, 0.03) == 0

    def test_negative_when_inflation_exceeds_nominal(self):
        assert real_return(0.02, 0.04) == pytest.approx(-0.02)
