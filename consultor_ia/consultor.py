"""
Consultor Financeiro IA
Interface unificada para análise das simulações com IA

Uso:
    from consultor_ia import ConsultorFinanceiro

    consultor = ConsultorFinanceiro(provider="ollama")
    html = consultor.gerar_analise(inputs, modelo, resultados, metricas)
"""

import logging
import re
from typing import Any, Dict, List, Optional

from config import ANTHROPIC_API_KEY, CONSULTOR_MODELO, CONSULTOR_PROVIDER
from motor_calculo import (
    CalculatorInputs, CompensationResult, FinancialModel, Simulacao, SimulationMetrics
)
from .erros import ErroConsultor
from .providers.ollama_provider import OllamaProvider, verificar_instalacao
from .providers.claude_provider import ClaudeProvider
from .prompts import (
    SYSTEM_PROMPT_FINANCEIRO,
    PROMPT_ANALISE_CONTRATACAO,
    get_contexto_simulacao
)

logger = logging.getLogger(__name__)

_CERCA_CODIGO = re.compile(r"```(?:html)?", re.IGNORECASE)

# Últimas 3 trocas (pergunta + resposta)
JANELA_HISTORICO = 6


class ConsultorFinanceiro:
    """
    Consultor Financeiro IA para simulações de contratação.

    Args:
        provider: "ollama" (padrão), "claude", ou instância de provider
        model: Nome do modelo (opcional, usa padrão do provider)
        api_key: API key para providers pagos
    """

    def __init__(self,
                 provider="ollama",
                 model: str = None,
                 api_key: str = None):
        self.historico: List[Dict[str, str]] = []
        self.simulacao: Optional[Simulacao] = None

        if isinstance(provider, str):
            self.provider = self._criar_provider(provider, model, api_key)
        else:
            self.provider = provider

    def _criar_provider(self, nome: str, model: str = None, api_key: str = None):
        """Cria instância do provider pelo nome."""
        if nome.lower() == "ollama":
            return OllamaProvider(model=model or "qwen2.5:7b")

        if nome.lower() == "claude":
            if not api_key:
                raise ValueError("API key necessária para Claude")
            return ClaudeProvider(api_key=api_key, model=model or "claude-sonnet-4-20250514")

        raise ValueError(f"Provider desconhecido: {nome}")

    def verificar_status(self) -> Dict[str, Any]:
        """Verifica se o provider está pronto para uso."""
        status = {
            "provider": self.provider.name,
            "disponivel": self.provider.is_available(),
            "pronto": False,
            "mensagem": ""
        }

        if status["disponivel"]:
            status["pronto"] = True
            status["mensagem"] = "✅ Consultor pronto para uso!"
        elif isinstance(self.provider, OllamaProvider):
            info = verificar_instalacao(self.provider)
            status["detalhes"] = info
            status["mensagem"] = "\n".join(info.get("instrucoes", []))
        else:
            status["mensagem"] = "Provider não disponível"

        return status

    def carregar_simulacao(self, simulacao: Simulacao):
        """Define a simulação usada como contexto do chat."""
        self.simulacao = simulacao
        self.limpar_historico()

    def _gerar(self, prompt: str) -> str:
        resposta = self.provider.generate(prompt, SYSTEM_PROMPT_FINANCEIRO)
        resposta = _CERCA_CODIGO.sub("", resposta or "").strip()
        if not resposta:
            raise ErroConsultor("A IA não retornou conteúdo")
        return resposta

    def gerar_analise(self,
                      inputs: CalculatorInputs,
                      modelo: FinancialModel,
                      resultados: List[CompensationResult],
                      metricas: SimulationMetrics) -> str:
        """
        Gera análise narrativa (HTML) dos cenários CLT, PJ e RPA.

        Raises:
            ErroConsultor: provider indisponível ou resposta vazia
        """
        contexto = get_contexto_simulacao(inputs, modelo, resultados, metricas)
        prompt = f"{contexto}\n\n{PROMPT_ANALISE_CONTRATACAO}"

        logger.info("Gerando análise com %s (%d cenários)", self.provider.name, len(resultados))
        return self._gerar(prompt)

    def analisar_simulacao(self, simulacao: Simulacao) -> str:
        """Atalho para gerar_analise a partir de uma Simulacao."""
        return self.gerar_analise(
            simulacao.inputs,
            simulacao.financial_model,
            simulacao.results,
            simulacao.metrics,
        )

    def perguntar(self, pergunta: str, incluir_historico: bool = True) -> str:
        """
        Faz uma pergunta livre sobre a simulação carregada.

        Args:
            pergunta: Pergunta do usuário
            incluir_historico: Se True, mantém contexto da conversa
        """
        messages = []

        if incluir_historico and self.historico:
            messages.extend(self.historico[-JANELA_HISTORICO:])

        if self.simulacao is not None:
            sim = self.simulacao
            contexto = get_contexto_simulacao(sim.inputs, sim.financial_model, sim.results, sim.metrics)
            conteudo = f"{contexto}\n\n❓ PERGUNTA DO USUÁRIO:\n{pergunta}"
        else:
            conteudo = pergunta

        messages.append({"role": "user", "content": conteudo})

        resposta = self.provider.chat(messages=messages, system_prompt=SYSTEM_PROMPT_FINANCEIRO)

        self.historico.append({"role": "user", "content": pergunta})
        self.historico.append({"role": "assistant", "content": resposta})
        self.historico = self.historico[-JANELA_HISTORICO:]

        return resposta

    def limpar_historico(self):
        """Limpa histórico de conversas."""
        self.historico = []


# Funções de conveniência
def criar_consultor_local(model: str = "qwen2.5:7b") -> ConsultorFinanceiro:
    """Cria consultor com Ollama (local, gratuito)."""
    return ConsultorFinanceiro(provider="ollama", model=model)


def criar_consultor_claude(api_key: str = None, model: str = None) -> ConsultorFinanceiro:
    """Cria consultor com Claude API (produção)."""
    return ConsultorFinanceiro(provider="claude", api_key=api_key or ANTHROPIC_API_KEY, model=model)


def criar_consultor_padrao() -> ConsultorFinanceiro:
    """Consultor conforme CONSULTOR_PROVIDER / CONSULTOR_MODELO do ambiente."""
    if CONSULTOR_PROVIDER.lower() == "claude":
        return criar_consultor_claude(model=CONSULTOR_MODELO)
    return criar_consultor_local(model=CONSULTOR_MODELO or "qwen2.5:7b")
