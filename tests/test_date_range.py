import unittest
from datetime import date, datetime

import pandas as pd

from fx_history.utils.date_range import DateRange, parse_date


class DateRangeTests(unittest.TestCase):
    def test_parse_date_accepts_common_inputs(self) -> None:
        self.assertEqual(parse_date("2024-02-29"), date(2024, 2, 29))
        self.assertEqual(parse_date(" 2024-02-29 "), date(2024, 2, 29))
        self.assertEqual(parse_date(datetime(2024, 2, 29, 23, 59)), date(2024, 2, 29))
        self.assertEqual(parse_date(pd.Timestamp("2024-02-29 08:00")), date(2024, 2, 29))
        self.assertEqual(parse_date(date(2024, 2, 29)), date(2024, 2, 29))

    def test_parse_date_rejects_other_formats(self) -> None:
        with self.assertRaises(ValueError):
            parse_date("29/02/2024")

    def test_membership(self) -> None:
        span = DateRange(start=date(2024, 2, 27), end=date(2024, 3, 1))
        self.assertIn(date(2024, 2, 27), span)
        self.assertIn(date(2024, 3, 1), span)
        self.assertIn(datetime(2024, 2, 28, 12), span)
        self.assertNotIn(date(2024, 3, 2), span)
        self.assertNotIn("2024-02-28", span)


if __name__ == "__main__":
    unittest.main()
