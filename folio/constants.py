"""Application constants to avoid magic strings."""


class InvestmentTypeName:
    """Investment type names with special handling.

    Investment types are free text; only stock investments are valued from a
    quote (price times quantity) and picked up by the price refresh.
    """

    STOCKS = "stocks"


class Environment:
    """Deployment mode constants."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


# Name of the grouping row created for legacy investments and fixture users
DEFAULT_PORTFOLIO_NAME = "My Portfolio"

# PostgreSQL setting read by row-level security policies
SESSION_USER_SETTING = "app.user_id"

# Key under which the bound identity is kept in Session.info
SESSION_USER_INFO_KEY = "folio_user_id"
