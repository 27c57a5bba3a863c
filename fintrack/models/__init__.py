from .finance import (
    User,
    Category,
    Transaction,
    Budget,
    CategoryType,
    TransactionType,
    BudgetPeriod,
    utc_now,
)
