"""
Consultor Financeiro IA
========================

Análise narrativa das simulações de contratação (CLT x PJ x RPA).
Suporta múltiplos providers (Ollama local, Claude API).

Uso básico:
-----------
    from consultor_ia import criar_consultor_local

    consultor = criar_consultor_local()
    html = consultor.analisar_simulacao(simulacao)

Configuração Ollama:
--------------------
    1. Instale Ollama: https://ollama.ai/download
    2. Baixe um modelo: ollama pull qwen2.5:7b
    3. Inicie o servidor: ollama serve

Produção (Claude):
------------------
    export CONSULTOR_PROVIDER=claude
    export ANTHROPIC_API_KEY=...
"""

from .erros import ErroConsultor

from .consultor import (
    ConsultorFinanceiro,
    criar_consultor_local,
    criar_consultor_claude,
    criar_consultor_padrao
)

from .providers import (
    OllamaProvider,
    ClaudeProvider,
    verificar_instalacao,
    MODELOS_RECOMENDADOS,
    MODELOS_CLAUDE
)

from .prompts import (
    SYSTEM_PROMPT_FINANCEIRO,
    PROMPT_ANALISE_CONTRATACAO,
    get_contexto_simulacao
)

__version__ = "1.1.0"

__all__ = [
    # Classes principais
    'ConsultorFinanceiro',
    'OllamaProvider',
    'ClaudeProvider',
    'ErroConsultor',

    # Funções de conveniência
    'criar_consultor_local',
    'criar_consultor_claude',
    'criar_consultor_padrao',
    'verificar_instalacao',

    # Prompts e contexto
    'SYSTEM_PROMPT_FINANCEIRO',
    'PROMPT_ANALISE_CONTRATACAO',
    'get_contexto_simulacao',

    # Constantes
    'MODELOS_RECOMENDADOS',
    'MODELOS_CLAUDE',
]
