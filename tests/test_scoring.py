import pytest

from nauta.domain import (
    Asset,
    BudgetTotals,
    Category,
    Debt,
    FinancialSnapshot,
    InsuranceConfig,
    Platform,
    SavingsGoal,
    YnabConfig,
)
from nauta.scoring import calculate_financial_health, calculate_nauta_index


def mock_convert(amount, from_currency, to_currency):
    if from_currency == to_currency:
        return amount
    rates = {"EUR-CLP": 1000, "CLP-EUR": 0.001, "EUR-USD": 1.1, "USD-EUR": 0.91}
    return amount * rates.get(f"{from_currency}-{to_currency}", 1)


def make_base(**overrides):
    data = dict(
        categories=(
            Category("1", "Comida", budget=500, currency="EUR"),
            Category("2", "Transporte", budget=200, currency="EUR"),
        ),
        ynab_config=YnabConfig(monthly_income=3500, currency="EUR"),
    )
    data.update(overrides)
    return FinancialSnapshot(**data)


def fund(amount, name="Fondo de Emergencia", **kw):
    return SavingsGoal("ef1", name, current_amount=amount, currency="EUR", **kw)


def test_empty_data_scores_zero_components():
    result = calculate_nauta_index(FinancialSnapshot(), mock_convert, "EUR")
    parts = result["breakdown"]
    assert parts["emergency_fund"]["score"] == 0
    assert parts["savings_rate"]["score"] == 0
    assert parts["toxic_debts"]["score"] == 10
    assert parts["insurance"]["score"] == 0
    assert parts["retirement"]["score"] == 0
    assert result["score"] == pytest.approx(10 / 70 * 100)
    assert result["status"] == "Critical"


def test_reference_scenario():
    result = calculate_nauta_index(make_base(), mock_convert, "EUR")
    parts = result["breakdown"]
    assert parts["savings_rate"]["score"] == 20
    assert parts["emergency_fund"]["score"] == 0
    assert parts["toxic_debts"]["score"] == 10
    assert parts["insurance"]["score"] == 0
    assert parts["retirement"]["score"] == 0
    assert result["total_score"] == 30
    assert result["score"] == pytest.approx(42.857, abs=0.001)
    assert result["status"] == "Regular"
    assert result["message"]


def test_emergency_fund_six_months_is_full_score():
    result = calculate_nauta_index(make_base(savings_goals=(fund(4200),)), mock_convert, "EUR")
    ef = result["breakdown"]["emergency_fund"]
    assert ef["score"] == 20
    assert ef["details"]["months_covered"] == 6
    assert ef["details"]["status"] == "Excellent"


def test_emergency_fund_partial_score():
    result = calculate_nauta_index(make_base(savings_goals=(fund(2100),)), mock_convert, "EUR")
    ef = result["breakdown"]["emergency_fund"]
    assert ef["score"] == 10
    assert ef["details"]["months_covered"] == 3
    assert ef["details"]["status"] == "Good"


def test_emergency_fund_capped_above_objective():
    result = calculate_nauta_index(make_base(savings_goals=(fund(70000),)), mock_convert, "EUR")
    assert result["breakdown"]["emergency_fund"]["score"] == 20


def test_emergency_fund_status_bands():
    regular = calculate_nauta_index(make_base(savings_goals=(fund(700),)), mock_convert, "EUR")
    low = calculate_nauta_index(make_base(savings_goals=(fund(350),)), mock_convert, "EUR")
    assert regular["breakdown"]["emergency_fund"]["details"]["status"] == "Regular"
    assert low["breakdown"]["emergency_fund"]["details"]["status"] == "Insufficient"


def test_emergency_fund_missing_and_no_expenses_statuses():
    none = calculate_nauta_index(make_base(), mock_convert, "EUR")
    assert none["breakdown"]["emergency_fund"]["details"]["status"] == "No emergency fund"

    no_expenses = calculate_nauta_index(
        make_base(categories=(), savings_goals=(fund(4200),)), mock_convert, "EUR"
    )
    ef = no_expenses["breakdown"]["emergency_fund"]
    assert ef["score"] == 0
    assert ef["details"]["status"] == "No expenses configured"


def test_emergency_fund_flag_beats_name():
    goals = (
        SavingsGoal("g1", "Emergency stash", current_amount=4200, currency="EUR"),
        SavingsGoal("g2", "Colchón", current_amount=700, currency="EUR", is_emergency_fund=True),
    )
    result = calculate_nauta_index(make_base(savings_goals=goals), mock_convert, "EUR")
    details = result["breakdown"]["emergency_fund"]["details"]
    assert details["goal"] == "Colchón"
    assert details["months_covered"] == 1


def test_emergency_fund_first_name_match_wins():
    goals = (
        SavingsGoal("g1", "Fondo emergencia A", current_amount=700, currency="EUR"),
        SavingsGoal("g2", "Emergency B", current_amount=4200, currency="EUR"),
    )
    result = calculate_nauta_index(make_base(savings_goals=goals), mock_convert, "EUR")
    assert result["breakdown"]["emergency_fund"]["details"]["goal"] == "Fondo emergencia A"


def test_emergency_fund_uses_linked_platforms():
    investments = (
        Platform("p1", "Cuenta", current_balance=1400, currency="EUR"),
        Asset("a1", "VWCE", quantity=10, current_price=100, currency="EUR"),
    )
    goal = fund(99999, linked_platforms=("p1", "a1", "missing"))
    result = calculate_nauta_index(
        make_base(savings_goals=(goal,), investments=investments), mock_convert, "EUR"
    )
    ef = result["breakdown"]["emergency_fund"]
    assert ef["details"]["current_amount"] == 1400
    assert ef["details"]["months_covered"] == 2
    assert ef["score"] == pytest.approx(2 / 6 * 20)


def test_emergency_fund_uses_legacy_platform_link():
    investments = (Platform("p1", "Cuenta", current_balance=1400000, currency="CLP"),)
    goal = fund(0, linked_platform_id="p1")
    result = calculate_nauta_index(
        make_base(savings_goals=(goal,), investments=investments), mock_convert, "EUR"
    )
    assert result["breakdown"]["emergency_fund"]["details"]["current_amount"] == pytest.approx(1400)


def test_savings_rate_full_score():
    result = calculate_nauta_index(make_base(), mock_convert, "EUR")
    details = result["breakdown"]["savings_rate"]["details"]
    assert details["savings_rate_percent"] == pytest.approx((3500 - 700) / 3500 * 100)
    assert details["status"] == "Excellent"


def test_savings_rate_negative_is_zero():
    snap = make_base(ynab_config=YnabConfig(monthly_income=500, currency="EUR"))
    part = calculate_nauta_index(snap, mock_convert, "EUR")["breakdown"]["savings_rate"]
    assert part["score"] == 0
    assert part["details"]["savings_amount"] == -200
    assert part["details"]["status"] == "Insufficient"


def test_savings_rate_linear_between():
    snap = make_base(ynab_config=YnabConfig(monthly_income=800, currency="EUR"))
    part = calculate_nauta_index(snap, mock_convert, "EUR")["breakdown"]["savings_rate"]
    assert part["score"] == pytest.approx(0.125 * 100)
    assert part["details"]["status"] == "Good"


def test_savings_rate_without_income():
    snap = make_base(ynab_config=None)
    part = calculate_nauta_index(snap, mock_convert, "EUR")["breakdown"]["savings_rate"]
    assert part["score"] == 0
    assert part["details"]["status"] == "No income configured"


def test_income_converted_to_display_currency():
    snap = make_base(ynab_config=YnabConfig(monthly_income=3500000, currency="CLP"))
    part = calculate_nauta_index(snap, mock_convert, "EUR")["breakdown"]["savings_rate"]
    assert part["details"]["monthly_income"] == pytest.approx(3500)


def test_toxic_debts_penalty():
    debts = (
        Debt("d1", "Tarjeta Visa", type="Tarjeta de Crédito", current_balance=5000, currency="EUR"),
        Debt("d2", "Préstamo Auto", type="Préstamo Automotriz", current_balance=10000, currency="EUR"),
    )
    part = calculate_nauta_index(make_base(debts=debts), mock_convert, "EUR")["breakdown"]["toxic_debts"]
    assert part["score"] == 5
    assert part["details"]["count"] == 2
    assert part["details"]["total_amount"] == 15000
    assert part["details"]["status"] == "Improvable"


def test_mortgage_is_not_toxic():
    debts = (Debt("d1", "Hipoteca", type="Hipoteca", current_balance=100000, currency="EUR"),)
    part = calculate_nauta_index(make_base(debts=debts), mock_convert, "EUR")["breakdown"]["toxic_debts"]
    assert part["score"] == 10
    assert part["details"]["count"] == 0
    assert part["details"]["status"] == "Excellent"


def test_toxic_flag_overrides_type():
    debts = (
        Debt("d1", "Tarjeta pagada", type="Tarjeta de Crédito", is_toxic=False),
        Debt("d2", "Préstamo familiar", type="Otro", is_toxic=True),
    )
    part = calculate_nauta_index(make_base(debts=debts), mock_convert, "EUR")["breakdown"]["toxic_debts"]
    assert part["details"]["count"] == 1
    assert part["details"]["types"][0]["name"] == "Préstamo familiar"


def test_toxic_debts_floor_at_zero():
    debts = tuple(Debt(f"d{i}", f"Deuda {i}", type="Préstamo Personal") for i in range(5))
    part = calculate_nauta_index(make_base(debts=debts), mock_convert, "EUR")["breakdown"]["toxic_debts"]
    assert part["score"] == 0
    assert part["details"]["status"] == "Critical"


def test_insurance_detected_in_categories():
    cats = make_base().categories + (
        Category("ins1", "Seguro Médico", budget=100),
        Category("ins2", "Seguro de Vida", budget=50),
    )
    part = calculate_nauta_index(make_base(categories=cats), mock_convert, "EUR")["breakdown"]["insurance"]
    assert part["details"]["has_health_insurance"] is True
    assert part["details"]["has_life_insurance"] is True
    assert part["details"]["has_catastrophic_insurance"] is False
    assert part["score"] == 7
    assert part["details"]["status"] == "Good protection"
    assert part["details"]["source"] == "categories"


def test_insurance_ges_counts_as_catastrophic():
    cats = (Category("ins", "Seguro GES", budget=10),)
    part = calculate_nauta_index(make_base(categories=cats), mock_convert, "EUR")["breakdown"]["insurance"]
    assert part["details"]["has_catastrophic_insurance"] is True
    assert part["score"] == 3
    assert part["details"]["status"] == "No protection detected"


def test_insurance_config_takes_priority():
    config = InsuranceConfig(has_health_insurance=True)
    part = calculate_nauta_index(make_base(), mock_convert, "EUR", config)["breakdown"]["insurance"]
    assert part["score"] == 4
    assert part["details"]["status"] == "Basic protection"
    assert part["details"]["source"] == "config"


def test_insurance_config_and_categories_are_combined():
    config = InsuranceConfig(has_health_insurance=True, has_catastrophic_insurance=True)
    cats = make_base().categories + (Category("ins", "Seguro de vida", budget=20),)
    part = calculate_nauta_index(make_base(categories=cats), mock_convert, "EUR", config)["breakdown"]["insurance"]
    assert part["score"] == 10
    assert part["details"]["source"] == "config+categories"


def test_insurance_config_all_false_falls_back_to_categories():
    config = InsuranceConfig()
    cats = (Category("ins", "Seguro Isapre", budget=80),)
    part = calculate_nauta_index(make_base(categories=cats), mock_convert, "EUR", config)["breakdown"]["insurance"]
    assert part["score"] == 4
    assert part["details"]["source"] == "categories"


def test_retirement_category_and_investment():
    cats = make_base().categories + (Category("r", "Aporte AFP", budget=100),)
    only_category = calculate_nauta_index(make_base(categories=cats), mock_convert, "EUR")
    assert only_category["breakdown"]["retirement"]["score"] == 5
    assert only_category["breakdown"]["retirement"]["details"]["status"] == "Good"

    investments = (Platform("p", "Fondo", type="APV", current_balance=1000),)
    both = calculate_nauta_index(make_base(categories=cats, investments=investments), mock_convert, "EUR")
    assert both["breakdown"]["retirement"]["score"] == 10
    assert both["breakdown"]["retirement"]["details"]["status"] == "Excellent"


def test_retirement_investment_name_match():
    investments = (Asset("a", "Mi apv régimen A", quantity=1, current_price=10, type="Fondo Mutuo"),)
    part = calculate_nauta_index(make_base(investments=investments), mock_convert, "EUR")["breakdown"]["retirement"]
    assert part["details"]["has_apv_investment"] is True
    assert part["details"]["has_apv_category"] is False
    assert part["score"] == 5


def test_perfect_profile_scores_100():
    snap = FinancialSnapshot(
        categories=(
            Category("1", "Gastos", budget=500),
            Category("2", "Seguro Médico", budget=100),
            Category("3", "Seguro de Vida", budget=50),
            Category("4", "Seguro Catastrófico", budget=30),
            Category("5", "APV", budget=200),
        ),
        savings_goals=(fund(6000),),
        investments=(Platform("p", "Fondo APV", type="APV", current_balance=5000),),
        ynab_config=YnabConfig(monthly_income=3500, currency="EUR"),
    )
    result = calculate_nauta_index(snap, mock_convert, "EUR")
    assert result["total_score"] == 70
    assert result["score"] == pytest.approx(100)
    assert result["status"] == "Excellent"


def test_scores_stay_within_bounds():
    scenarios = [
        FinancialSnapshot(),
        make_base(),
        make_base(ynab_config=YnabConfig(monthly_income=1, currency="EUR")),
        make_base(savings_goals=(fund(10 ** 9),)),
        make_base(debts=tuple(Debt(str(i), "x", type="Tarjeta de Crédito") for i in range(10))),
    ]
    for snap in scenarios:
        result = calculate_nauta_index(snap, mock_convert, "EUR", InsuranceConfig(True, True, True))
        assert 0 <= result["score"] <= 100
        for part in result["breakdown"].values():
            assert 0 <= part["score"] <= part["max"]


def test_index_is_deterministic():
    snap = make_base(savings_goals=(fund(2100),))
    assert calculate_nauta_index(snap, mock_convert, "EUR") == calculate_nauta_index(snap, mock_convert, "EUR")


def test_financial_health_full_marks():
    snap = FinancialSnapshot(
        debts=(Debt("d", "Hipoteca", type="Hipoteca", monthly_payment=300),),
        savings_goals=(fund(18000),),
        investments=tuple(Platform(str(i), f"P{i}", current_balance=100) for i in range(5)),
        ynab_config=YnabConfig(monthly_income=3000, currency="EUR"),
        totals=BudgetTotals(budgeted=2100, spent=1800, available=900),
    )
    assert calculate_financial_health(snap, mock_convert, "EUR") == 100


def test_financial_health_partial_marks():
    snap = FinancialSnapshot(
        debts=(Debt("d", "Visa", type="Tarjeta de Crédito", monthly_payment=900),),
        savings_goals=(fund(3000),),
        investments=(Platform("p", "Broker", current_balance=100),),
        ynab_config=YnabConfig(monthly_income=3000, currency="EUR"),
        totals=BudgetTotals(budgeted=2800, spent=2700, available=100),
    )
    # debt 0.3 -> 20, savings 0.033 -> 5, fund 1 month -> 5, one investment -> 5
    assert calculate_financial_health(snap, mock_convert, "EUR") == 35
