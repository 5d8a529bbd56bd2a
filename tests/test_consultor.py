import unittest
from unittest import mock

import requests

from consultor_ia import ConsultorFinanceiro, ErroConsultor, get_contexto_simulacao
from consultor_ia.providers import ClaudeProvider, OllamaProvider, verificar_instalacao
from motor_calculo import CalculatorInputs, FinancialModel, simular


class _ProviderFake:
    name = "Fake"

    def __init__(self, resposta="<h2>Análise</h2>", disponivel=True):
        self.resposta = resposta
        self.disponivel = disponivel
        self.prompts = []
        self.conversas = []

    def is_available(self):
        return self.disponivel

    def generate(self, prompt, system_prompt=""):
        self.prompts.append(prompt)
        return self.resposta

    def chat(self, messages, system_prompt=""):
        self.conversas.append(list(messages))
        return f"resposta {len(self.conversas)}"


def _simulacao(**alteracoes):
    inputs = CalculatorInputs(clients_per_hour=3, professional_clients_per_hour=3,
                              salary_revenue_percentage=40, iss_percentage=6, **alteracoes)
    return simular(inputs, FinancialModel())


class TestContexto(unittest.TestCase):
    def test_contexto_com_cenarios(self):
        sim = _simulacao()

        contexto = get_contexto_simulacao(sim.inputs, sim.financial_model, sim.results, sim.metrics)

        self.assertIn("Capacidade máxima: 60 alunos", contexto)
        self.assertIn("Faturamento projetado: R$ 14.700,00", contexto)
        self.assertIn("CLT (Carteira Assinada)", contexto)
        self.assertIn("Autônomo (RPA)", contexto)
        self.assertNotIn("deveria ser 100%", contexto)

    def test_contexto_modelo_desbalanceado_sem_cenarios(self):
        sim = simular(CalculatorInputs(professional_hours_per_week=0),
                      FinancialModel(payroll=50))

        contexto = get_contexto_simulacao(sim.inputs, sim.financial_model, sim.results, sim.metrics)

        self.assertIn("A distribuição soma 110,0%", contexto)
        self.assertIn("Nenhum cenário calculado", contexto)


class TestConsultorFinanceiro(unittest.TestCase):
    def test_analise_remove_cerca_de_codigo(self):
        provider = _ProviderFake("```html\n<h2>Análise</h2><p>PJ cabe no orçamento.</p>\n```")
        consultor = ConsultorFinanceiro(provider=provider)

        html = consultor.analisar_simulacao(_simulacao())

        self.assertEqual("<h2>Análise</h2><p>PJ cabe no orçamento.</p>", html)
        self.assertIn("PJ (Prestador de Serviço)", provider.prompts[0])
        self.assertIn("<h2>", provider.prompts[0])

    def test_resposta_vazia(self):
        consultor = ConsultorFinanceiro(provider=_ProviderFake("```html\n```"))

        with self.assertRaises(ErroConsultor):
            consultor.analisar_simulacao(_simulacao())

    def test_perguntar_usa_simulacao_e_historico(self):
        provider = _ProviderFake()
        consultor = ConsultorFinanceiro(provider=provider)
        consultor.carregar_simulacao(_simulacao())

        for i in range(5):
            consultor.perguntar(f"pergunta {i}")

        self.assertEqual(6, len(consultor.historico))
        self.assertEqual("pergunta 2", consultor.historico[0]["content"])
        ultima = provider.conversas[-1]
        # Últimas 3 trocas + pergunta atual
        self.assertEqual(7, len(ultima))
        self.assertEqual("pergunta 1", ultima[0]["content"])
        self.assertIn("Capacidade máxima", ultima[-1]["content"])
        self.assertIn("pergunta 4", ultima[-1]["content"])

    def test_carregar_simulacao_limpa_historico(self):
        consultor = ConsultorFinanceiro(provider=_ProviderFake())
        consultor.perguntar("oi")

        consultor.carregar_simulacao(_simulacao())

        self.assertEqual([], consultor.historico)

    def test_status(self):
        self.assertTrue(ConsultorFinanceiro(provider=_ProviderFake()).verificar_status()["pronto"])

        status = ConsultorFinanceiro(provider=_ProviderFake(disponivel=False)).verificar_status()
        self.assertFalse(status["pronto"])
        self.assertEqual("Provider não disponível", status["mensagem"])

    def test_provider_desconhecido(self):
        with self.assertRaises(ValueError):
            ConsultorFinanceiro(provider="gemini")

    def test_claude_sem_chave(self):
        with self.assertRaises(ValueError):
            ConsultorFinanceiro(provider="claude", api_key=None)

    def test_ollama_por_nome(self):
        consultor = ConsultorFinanceiro(provider="ollama", model="llama3.1:8b")

        self.assertIsInstance(consultor.provider, OllamaProvider)
        self.assertEqual("llama3.1:8b", consultor.provider.model)


class TestOllamaProvider(unittest.TestCase):
    @mock.patch("consultor_ia.providers.ollama_provider.requests.post")
    def test_servidor_fora_do_ar(self, post):
        post.side_effect = requests.ConnectionError("recusado")

        with self.assertRaises(ErroConsultor):
            OllamaProvider().generate("oi")

    @mock.patch("consultor_ia.providers.ollama_provider.requests.post")
    def test_resposta_do_chat(self, post):
        post.return_value = mock.Mock(status_code=200)
        post.return_value.json.return_value = {"message": {"content": "<p>ok</p>"}}

        resposta = OllamaProvider(model="phi3:mini").chat(
            [{"role": "user", "content": "oi"}], system_prompt="sistema"
        )

        self.assertEqual("<p>ok</p>", resposta)
        enviado = post.call_args.kwargs["json"]
        self.assertEqual("phi3:mini", enviado["model"])
        self.assertEqual("system", enviado["messages"][0]["role"])

    @mock.patch("consultor_ia.providers.ollama_provider.requests.post")
    def test_erro_http(self, post):
        post.return_value = mock.Mock(status_code=500, text="falhou")

        with self.assertRaises(ErroConsultor):
            OllamaProvider().generate("oi")

    @mock.patch("consultor_ia.providers.ollama_provider.requests.get")
    def test_instalacao_sem_servidor(self, get):
        get.side_effect = requests.ConnectionError("recusado")

        info = verificar_instalacao(OllamaProvider())

        self.assertFalse(info["ollama_rodando"])
        self.assertFalse(info["pronto"])
        self.assertTrue(info["instrucoes"])

    @mock.patch("consultor_ia.providers.ollama_provider.requests.get")
    def test_instalacao_com_modelo(self, get):
        get.return_value = mock.Mock(status_code=200)
        get.return_value.json.return_value = {"models": [{"name": "qwen2.5:7b"}]}

        info = verificar_instalacao(OllamaProvider())

        self.assertTrue(info["pronto"])
        self.assertEqual(["qwen2.5:7b"], info["modelos_instalados"])


class TestClaudeProvider(unittest.TestCase):
    def _provider(self, erro):
        provider = ClaudeProvider(api_key="chave-teste")
        provider._client = mock.Mock()
        provider._client.messages.create.side_effect = erro
        provider._client.messages.stream.side_effect = erro
        return provider

    def test_erro_no_chat(self):
        provider = self._provider(RuntimeError("rate limit"))

        with self.assertRaises(ErroConsultor):
            provider.generate("oi")

    def test_erro_no_streaming(self):
        provider = self._provider(RuntimeError("rate limit"))

        with self.assertRaises(ErroConsultor):
            list(provider.chat([{"role": "user", "content": "oi"}], stream=True))

    def test_sem_chave_indisponivel(self):
        self.assertFalse(ClaudeProvider(api_key=None).is_available())


if __name__ == "__main__":
    unittest.main()
