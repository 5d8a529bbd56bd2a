import os
import unittest

from streamlit.testing.v1 import AppTest

APP = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "app.py")


def _botao(at, rotulo):
    return next(b for b in at.button if b.label == rotulo)


class TestFormulario(unittest.TestCase):
    def setUp(self):
        self.at = AppTest.from_file(APP, default_timeout=60)
        self.at.run()

    def test_valores_padrao(self):
        self.assertFalse(self.at.exception)
        self.assertEqual(350.0, self.at.number_input(key="in_monthly_price_per_client").value)
        self.assertEqual(40.0, self.at.number_input(key="fm_payroll").value)

    def test_edicao_sobrevive_ao_historico(self):
        self.at.number_input(key="in_monthly_price_per_client").set_value(500.0).run()
        self.at.number_input(key="fm_payroll").set_value(35.0).run()

        _botao(self.at, "🗂️ Histórico").click().run()
        self.assertEqual(0, len(self.at.number_input))

        _botao(self.at, "⬅️ Voltar").click().run()

        self.assertFalse(self.at.exception)
        self.assertEqual(500.0, self.at.number_input(key="in_monthly_price_per_client").value)
        self.assertEqual(35.0, self.at.number_input(key="fm_payroll").value)


if __name__ == "__main__":
    unittest.main()
