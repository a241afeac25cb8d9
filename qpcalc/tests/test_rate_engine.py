import unittest
from qpcalc.domain.errors import InvalidInput, MissingRate, UnknownUnit
from qpcalc.logic.rates.engine import configure, compute_price, price_to_quantity, quantity_to_price
from qpcalc.logic.units.catalog import get_unit


class TestConfigure(unittest.TestCase):

    def test_price_per_base_unit(self):
        cases = [(100, 5, "kg"), (100, 500, "g"), (2000, 1, "quintal"), (5000, 2, "ton"),
                 (60, 3, "l"), (45, 750, "ml"), (37.85, 1, "gallon")]
        for price, quantity, symbol in cases:
            unit = get_unit(symbol)
            rate = configure(price, quantity, unit)
            self.assertEqual(rate.price_per_base_unit, price / (quantity * unit.factor_to_base))
            self.assertEqual(rate.category, unit.category)
            self.assertEqual(rate.anchor, unit)

    def test_weight_scenario(self):
        rate = configure(100, 5, get_unit("kg"))
        self.assertEqual(rate.price_per_base_unit, 20)
        result = price_to_quantity(250, rate)
        self.assertEqual(result.unit.symbol, "kg")
        self.assertEqual(result.formatted, "12.500 kg")

    def test_volume_scenario(self):
        rate = configure(60, 3, get_unit("l"))
        self.assertEqual(rate.price_per_base_unit, 20)
        quote = quantity_to_price(500, get_unit("ml"), rate, currency="₹")
        self.assertAlmostEqual(quote.value, 10.0)
        self.assertEqual(quote.formatted, "₹10.00")

    def test_numeric_strings_accepted(self):
        rate = configure("100", " 5 ", get_unit("kg"))
        self.assertEqual(rate.price_per_base_unit, 20)

    def test_invalid_input(self):
        kg = get_unit("kg")
        for price, quantity in [(0, 5), (100, -5), (-1, 1), ("", 5), (100, ""), (None, 5),
                                ("abc", 5), (float("nan"), 5), (float("inf"), 1), (True, 1)]:
            with self.assertRaises(InvalidInput, msg=f"{price!r}, {quantity!r}"):
                configure(price, quantity, kg)

    def test_underflow_and_overflow_are_invalid(self):
        # positive finite inputs whose derived rates leave float range
        cases = [(1, 1e-322, "g"), (1e-320, 1e10, "kg"), (1e308, 1e-10, "kg")]
        for price, quantity, symbol in cases:
            with self.assertRaises(InvalidInput, msg=f"{price!r}, {quantity!r} {symbol}"):
                configure(price, quantity, get_unit(symbol))

    def test_describe(self):
        rate = configure(100, 500, get_unit("g"))
        self.assertEqual(rate.describe("₹"), "₹0.20/g")


class TestCalculations(unittest.TestCase):

    def test_gram_anchor_uses_gram_ladder(self):
        rate = configure(100, 500, get_unit("g"))
        self.assertEqual(price_to_quantity(100, rate).formatted, "500.000 g")
        self.assertEqual(price_to_quantity(300, rate).formatted, "1.500 kg")

    def test_weight_price_precision(self):
        rate = configure(100, 5, get_unit("kg"))
        quote = quantity_to_price(2, get_unit("quintal"), rate, currency="₹")
        self.assertEqual(quote.formatted, "₹4000.000")
        self.assertEqual(quote.precision, 3)

    def test_compute_price(self):
        self.assertEqual(compute_price(0.5, 20), 10)

    def test_missing_rate(self):
        with self.assertRaises(MissingRate):
            price_to_quantity(10, None)
        with self.assertRaises(MissingRate):
            quantity_to_price(10, get_unit("kg"), None)

    def test_unit_from_other_category(self):
        rate = configure(60, 3, get_unit("l"))
        with self.assertRaises(UnknownUnit):
            quantity_to_price(1, get_unit("kg"), rate)

    def test_invalid_calculation_input(self):
        rate = configure(100, 5, get_unit("kg"))
        with self.assertRaises(InvalidInput):
            price_to_quantity("", rate)
        with self.assertRaises(InvalidInput):
            quantity_to_price(-2, get_unit("kg"), rate)

    def test_results_out_of_float_range(self):
        rate = configure(100, 5, get_unit("kg"))
        with self.assertRaises(InvalidInput):
            quantity_to_price(1e308, get_unit("ton"), rate)
        cheap = configure(1e-300, 1, get_unit("kg"))
        with self.assertRaises(InvalidInput):
            price_to_quantity(1e308, cheap)

    def test_round_trip(self):
        configs = [
            ((100, 5, "kg"), [250, 1, 1999, 40000]),
            ((100, 500, "g"), [5, 300, 50000]),
            ((2000, 1, "quintal"), [1, 500, 30000]),
            ((5000, 1, "ton"), [0.01, 100, 20000]),
            ((60, 3, "l"), [10, 100]),
            ((1, 1000, "ml"), [0.5, 5]),
            ((37.85, 1, "gallon"), [1, 10, 100]),
        ]
        for (price, quantity, symbol), budgets in configs:
            rate = configure(price, quantity, get_unit(symbol))
            for budget in budgets:
                result = price_to_quantity(budget, rate)
                back = quantity_to_price(result.value, result.unit, rate).value
                self.assertAlmostEqual(back / budget, 1.0, places=3, msg=f"{symbol} {budget}")

    def test_gallon_display_does_not_round_trip(self):
        # l and ml upscale by 3785.41 while a gallon converts back at 3.785 l
        rate = configure(1, 1, get_unit("l"))
        result = price_to_quantity(5000, rate)
        self.assertEqual(result.formatted, "1.32 gallon")
        back = quantity_to_price(result.value, result.unit, rate).value
        self.assertAlmostEqual(back, 5000 * 3.785 / 3785.41, places=9)
        self.assertAlmostEqual(back / 5000, 0.001, places=4)


if __name__ == '__main__':
    unittest.main()
