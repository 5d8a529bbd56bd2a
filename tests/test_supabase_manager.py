import unittest

from motor_calculo import CalculatorInputs, FinancialModel, simular
from supabase_manager import SimulacaoManager


class _Resposta:
    def __init__(self, data):
        self.data = data


class _ConsultaFake:
    """Imita o query builder do supabase-py (table().insert().execute() etc.)"""

    def __init__(self, banco):
        self.banco = banco
        self.operacao = None
        self.registro = None
        self.filtros = []
        self.ordem = None

    def insert(self, registro):
        self.operacao, self.registro = "insert", registro
        return self

    def select(self, colunas):
        self.operacao = "select"
        return self

    def delete(self):
        self.operacao = "delete"
        return self

    def order(self, coluna, desc=False):
        self.ordem = (coluna, desc)
        return self

    def eq(self, coluna, valor):
        self.filtros.append((coluna, valor))
        return self

    def execute(self):
        if self.banco.erro:
            raise self.banco.erro

        if self.operacao == "insert":
            self.banco.sequencia += 1
            linha = dict(self.registro, id=f"sim-{self.banco.sequencia}",
                         created_at=f"2026-01-{self.banco.sequencia:02d}T10:00:00")
            self.banco.linhas.append(linha)
            return _Resposta([] if self.banco.insert_vazio else [linha])

        if self.operacao == "select":
            linhas = list(self.banco.linhas)
            if self.ordem:
                coluna, desc = self.ordem
                linhas.sort(key=lambda l: l[coluna], reverse=desc)
            return _Resposta(linhas)

        if self.operacao == "delete":
            self.banco.linhas = [
                l for l in self.banco.linhas
                if not all(l.get(c) == v for c, v in self.filtros)
            ]
            return _Resposta([])

        raise AssertionError(f"operação inesperada: {self.operacao}")


class _SupabaseFake:
    def __init__(self, erro=None, insert_vazio=False):
        self.linhas = []
        self.sequencia = 0
        self.erro = erro
        self.insert_vazio = insert_vazio
        self.tabelas = []

    def table(self, nome):
        self.tabelas.append(nome)
        return _ConsultaFake(self)


def _simulacao():
    return simular(CalculatorInputs(), FinancialModel())


class TestSimulacaoManager(unittest.TestCase):
    def setUp(self):
        self.banco = _SupabaseFake()
        self.manager = SimulacaoManager(client=self.banco)

    def test_salvar_grava_payload_em_content(self):
        payload = _simulacao().to_dict()

        resultado = self.manager.save_simulation("user-1", "Cenário A", payload)

        self.assertEqual({"success": True, "id": "sim-1"}, resultado)
        self.assertEqual(["financial_simulations"], self.banco.tabelas)
        linha = self.banco.linhas[0]
        self.assertEqual("user-1", linha["user_id"])
        self.assertEqual("Cenário A", linha["title"])
        self.assertEqual(payload, linha["content"])

    def test_listar_mais_recentes_primeiro(self):
        self.manager.save_simulation("user-1", "Primeira", {"aiAnalysis": ""})
        self.manager.save_simulation("user-1", "Segunda", {"aiAnalysis": "<p>ok</p>"})

        registros = self.manager.fetch_simulations()

        self.assertEqual(["Segunda", "Primeira"], [r["title"] for r in registros])
        self.assertEqual("sim-2", registros[0]["id"])
        self.assertEqual("2026-01-02T10:00:00", registros[0]["createdAt"])
        self.assertEqual("<p>ok</p>", registros[0]["aiAnalysis"])

    def test_excluir(self):
        self.manager.save_simulation("user-1", "A", {})
        self.manager.save_simulation("user-1", "B", {})

        resultado = self.manager.delete_simulation("sim-1")

        self.assertTrue(resultado["success"])
        self.assertEqual(["B"], [r["title"] for r in self.manager.fetch_simulations()])

    def test_salvar_e_listar_objetos(self):
        sim = _simulacao()

        resultado = self.manager.salvar("user-1", "Manhã", sim)
        carregadas = self.manager.listar()

        self.assertTrue(resultado["success"])
        self.assertEqual("sim-1", sim.id)
        self.assertEqual("Manhã", sim.title)
        self.assertEqual(1, len(carregadas))
        self.assertEqual(sim.results, carregadas[0].results)
        self.assertEqual(sim.metrics, carregadas[0].metrics)

    def test_listar_ignora_registro_invalido(self):
        self.manager.save_simulation("user-1", "Quebrada", {"results": [{"scenarioName": "CLT"}]})
        self.manager.save_simulation("user-1", "Boa", _simulacao().to_dict())

        self.assertEqual(["Boa"], [s.title for s in self.manager.listar()])

    def test_falha_do_banco_vira_resultado(self):
        manager = SimulacaoManager(client=_SupabaseFake(erro=RuntimeError("conexão recusada")))

        salvar = manager.save_simulation("user-1", "X", {})
        excluir = manager.delete_simulation("sim-1")

        self.assertFalse(salvar["success"])
        self.assertIn("conexão recusada", salvar["error"])
        self.assertFalse(excluir["success"])
        self.assertEqual([], manager.fetch_simulations())

    def test_insert_sem_retorno(self):
        manager = SimulacaoManager(client=_SupabaseFake(insert_vazio=True))

        resultado = manager.save_simulation("user-1", "X", {})

        self.assertFalse(resultado["success"])
        self.assertIn("error", resultado)

    def test_sem_cliente_configurado(self):
        manager = SimulacaoManager(client=_SupabaseFake())
        manager.supabase = None

        self.assertFalse(manager.save_simulation("user-1", "X", {})["success"])
        self.assertFalse(manager.delete_simulation("sim-1")["success"])
        self.assertEqual([], manager.fetch_simulations())
        self.assertEqual([], manager.listar())


if __name__ == "__main__":
    unittest.main()
