import unittest
from qpcalc.domain.errors import UnknownUnit
from qpcalc.logic.units.catalog import units_for, factor, get_unit, default_unit, base_unit


class TestUnitCatalog(unittest.TestCase):

    def test_weight_units_in_order(self):
        units = units_for("weight")
        self.assertEqual([u.symbol for u in units], ["g", "kg", "quintal", "ton"])
        self.assertEqual([factor(u) for u in units], [0.001, 1, 100, 1000])

    def test_volume_units_in_order(self):
        units = units_for("volume")
        self.assertEqual([u.symbol for u in units], ["ml", "l", "gallon"])
        self.assertEqual([factor(u) for u in units], [0.001, 1, 3.785])

    def test_defaults_and_base(self):
        self.assertEqual(default_unit("weight").symbol, "kg")
        self.assertEqual(default_unit("volume").symbol, "l")
        self.assertEqual(base_unit("weight").name, "kilogram")
        self.assertEqual(base_unit("volume").name, "litre")

    def test_get_unit_checks_category(self):
        self.assertEqual(get_unit("ml", "volume").category, "volume")
        with self.assertRaises(UnknownUnit):
            get_unit("ml", "weight")
        with self.assertRaises(UnknownUnit):
            get_unit("stone")

    def test_unknown_category(self):
        with self.assertRaises(UnknownUnit):
            units_for("length")

    def test_units_for_returns_copy(self):
        units = units_for("weight")
        units.clear()
        self.assertEqual(len(units_for("weight")), 4)


if __name__ == '__main__':
    unittest.main()
