"""Tests for ValuationService."""

from datetime import date
from decimal import Decimal

from folio.models import Distribution, Investment, Portfolio
from folio.services.portfolio import ValuationService


def make_investment(amount="1000.00", investment_type="stocks", distributions=(), **fields):
    investment = Investment(
        id=fields.pop("id", 1),
        name="AAPL shares",
        amount=Decimal(amount),
        investment_type=investment_type,
        **fields,
    )
    investment.distributions = [
        Distribution(date=date(2025, 6, 1), amount=Decimal(value)) for value in distributions
    ]
    return investment


class TestCurrentValue:
    """Tests for ValuationService.current_value."""

    def test_priced_stock_uses_market_value(self):
        investment = make_investment(
            stock_quantity=Decimal("10"), current_stock_price=Decimal("187.335")
        )
        assert ValuationService.current_value(investment) == Decimal("1873.35")

    def test_stock_without_price_falls_back_to_amount(self):
        investment = make_investment(stock_quantity=Decimal("10"))
        assert ValuationService.current_value(investment) == Decimal("1000.00")

    def test_non_stock_uses_amount_even_with_price(self):
        investment = make_investment(
            investment_type="crypto",
            stock_quantity=Decimal("2"),
            current_stock_price=Decimal("50000"),
        )
        assert ValuationService.current_value(investment) == Decimal("1000.00")


class TestValueInvestment:
    """Tests for ValuationService.value_investment."""

    def test_no_distributions(self):
        totals = ValuationService.value_investment(make_investment())
        assert totals.total_distributions == Decimal("0.00")
        assert totals.current_return == Decimal("-1000.00")

    def test_return_is_distributions_minus_principal(self):
        totals = ValuationService.value_investment(make_investment(distributions=["25.50"]))
        assert totals.total_distributions == Decimal("25.50")
        assert totals.current_return == Decimal("-974.50")


class TestAggregates:
    """Portfolio and user level sums."""

    def test_empty_portfolio(self):
        totals = ValuationService.value_portfolio(Portfolio(name="Growth", investments=[]))
        assert totals.investment_count == 0
        assert totals.total_invested == Decimal("0.00")
        assert totals.total_value == Decimal("0.00")

    def test_portfolio_sums_investments(self):
        portfolio = Portfolio(
            name="Growth",
            investments=[
                make_investment(id=1, distributions=["10"]),
                make_investment(
                    id=2,
                    amount="500",
                    stock_quantity=Decimal("4"),
                    current_stock_price=Decimal("150"),
                ),
            ],
        )

        totals = ValuationService.value_portfolio(portfolio)

        assert totals.investment_count == 2
        assert totals.total_invested == Decimal("1500.00")
        assert totals.total_distributions == Decimal("10.00")
        assert totals.total_value == Decimal("1600.00")

    def test_user_counts_empty_portfolios(self):
        portfolios = [
            Portfolio(name="Growth", investments=[make_investment()]),
            Portfolio(name="Empty", investments=[]),
        ]

        totals = ValuationService.value_user(portfolios)

        assert totals.portfolio_count == 2
        assert totals.investment_count == 1
        assert totals.total_value == Decimal("1000.00")
