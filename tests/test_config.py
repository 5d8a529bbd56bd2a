import unittest

from config import format_currency, format_number, format_percent


class TestFormatacao(unittest.TestCase):
    def test_moeda(self):
        self.assertEqual("R$ 14.700,00", format_currency(14700))
        self.assertEqual("R$ -1.234,57", format_currency(-1234.567))
        self.assertEqual("-", format_currency(None))
        self.assertEqual("-", format_currency(float("nan")))

    def test_percentual(self):
        self.assertEqual("70,0%", format_percent(70))
        self.assertEqual("6,25%", format_percent(6.25, decimals=2))
        self.assertEqual("-", format_percent(None))

    def test_numero(self):
        self.assertEqual("1.528", format_number(1528))
        self.assertEqual("4,3", format_number(4.33, decimals=1))
        self.assertEqual("-", format_number("abc"))


if __name__ == "__main__":
    unittest.main()
