import unittest

from modules.pdf_report import _html_para_paragrafos, criar_estilos, gerar_relatorio_simulacao
from motor_calculo import CalculatorInputs, FinancialModel, simular


class TestRelatorioPDF(unittest.TestCase):
    def test_relatorio_com_cenarios_e_analise(self):
        sim = simular(CalculatorInputs(), FinancialModel(payroll=10))
        sim.title = "Simulação <manhã>"
        sim.ai_analysis = "<h2>Resumo</h2><p>PJ & CLT</p><ul><li><strong>RPA</strong> em risco</li></ul>"

        pdf = gerar_relatorio_simulacao(sim, nome_estudio="Studio R&B", observacoes="Revisar em 3 meses")

        self.assertTrue(pdf.getvalue().startswith(b"%PDF"))

    def test_relatorio_sem_cenarios(self):
        sim = simular(CalculatorInputs(professional_occupancy_rate=0), FinancialModel())

        pdf = gerar_relatorio_simulacao(sim)

        self.assertEqual([], sim.results)
        self.assertTrue(pdf.getvalue().startswith(b"%PDF"))

    def test_html_da_ia_vira_paragrafos(self):
        html = "<h2>Viabilidade</h2><p>CLT custa &gt; orçamento</p><ul><li>PJ</li><li>RPA</li></ul>"

        paragrafos = list(_html_para_paragrafos(html, criar_estilos()))
        textos = [p.getPlainText() for p in paragrafos]

        self.assertEqual("Viabilidade", textos[0])
        self.assertIn("CLT custa > orçamento", textos)
        self.assertIn("• PJ", textos)
        self.assertIn("• RPA", textos)


if __name__ == "__main__":
    unittest.main()
