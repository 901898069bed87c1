from datetime import date

import pandas as pd

import fx_history
from fx_history import Currency, ExchangeEngine

print(fx_history.__version__)  # 0.1.0

# Default usage: CSV cache in ./data, rates from the ECB data API
fx = ExchangeEngine.init()

# Direct, inverse and cross rates for a given day
print(fx.rate(Currency.USD, Currency.EUR, date(2024, 1, 3)))
print(fx.rate("EUR", "GBP", date(2024, 1, 3)))
print(fx.rate("USD", "JPY", "2024-01-06"))  # weekend: carries Friday's rate

# Dates covered by the cache
print(fx.coverage("USD"))
# => DateRange(start=datetime.date(1999, 1, 4), end=datetime.date(...))

# Convert a ledger into euros
ledger = pd.DataFrame(
    {
        "date": ["2024-01-03", "2024-01-04"],
        "currency": ["USD", "GBP"],
        "value": [120.0, 80.0],
    }
)
print(fx.convert_table(Currency.EUR, ledger))

# Same engine on a SQLite cache, only for the currencies you need
fx_sql = ExchangeEngine.init("sqlite:///fx_history.db", currencies=["USD", "GBP"])
print(fx_sql.rate("GBP", "USD", date.today()))

# Pick up newly published rates later in the day
fx.reload()
