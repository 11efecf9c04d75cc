import pytest

from moneywise.utils.tax import PTKP_RATES, calculate_income_tax, marginal_rate, progressive_tax


def test_income_below_allowance_is_not_taxed():
    result = calculate_income_tax(4_000_000)

    assert result["gross_income"] == 48_000_000
    assert result["ptkp"] == PTKP_RATES["TK/0"]
    assert result["taxable_income"] == 0
    assert result["annual_tax"] == 0
    assert result["monthly_tax"] == 0
    assert result["effective_rate"] == 0.0
    assert result["marginal_rate"] == 5


def test_second_bracket():
    result = calculate_income_tax(10_000_000, "TK/0")

    assert result["taxable_income"] == 66_000_000
    # 60M at 5% plus 6M at 15%
    assert result["annual_tax"] == 3_900_000
    assert result["monthly_tax"] == 325_000
    assert result["effective_rate"] == pytest.approx(3_900_000 / 66_000_000 * 100)
    assert result["marginal_rate"] == 15


def test_deductions_and_married_allowance():
    result = calculate_income_tax(50_000_000, "K/3", job_expenses=500_000, pension_contribution=200_000)

    assert result["deductions"] == 8_400_000
    assert result["net_income"] == 591_600_000
    assert result["ptkp"] == 72_000_000
    assert result["taxable_income"] == 519_600_000
    assert result["annual_tax"] == 99_880_000
    assert result["monthly_tax"] == 8_323_333
    assert result["marginal_rate"] == 30


def test_unknown_status_uses_single_allowance():
    assert calculate_income_tax(10_000_000, "X/9")["ptkp"] == PTKP_RATES["TK/0"]


@pytest.mark.parametrize("taxable,tax,rate", [
    (60_000_000, 3_000_000, 5),
    (60_000_001, 3_000_000.15, 15),
    (250_000_000, 31_500_000, 15),
    (500_000_000, 94_000_000, 25),
    (600_000_000, 124_000_000, 30),
])
def test_bracket_boundaries(taxable, tax, rate):
    assert progressive_tax(taxable) == pytest.approx(tax)
    assert marginal_rate(taxable) == rate


def test_tax_never_decreases_with_income():
    previous = -1
    for monthly in range(0, 80_000_000, 2_500_000):
        tax = calculate_income_tax(monthly)["annual_tax"]
        assert tax >= previous
        previous = tax


def test_amounts_round_half_up():
    # 120 taxable gives 6 of tax a year, 0.5 a month
    result = calculate_income_tax(4_500_010)

    assert result["taxable_income"] == 120
    assert result["annual_tax"] == 6
    assert result["monthly_tax"] == 1
