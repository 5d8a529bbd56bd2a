"""
Provider Claude - API Anthropic
Para uso em produção (sem servidor local)
"""

import logging
from typing import Generator

from ..erros import ErroConsultor

logger = logging.getLogger(__name__)


class ClaudeProvider:
    """
    Provider para Claude API (Anthropic).

    Requisitos:
    1. Criar conta em console.anthropic.com
    2. Gerar API key (ANTHROPIC_API_KEY)
    """

    def __init__(self,
                 api_key: str = None,
                 model: str = "claude-sonnet-4-20250514"):
        self.api_key = api_key
        self.model = model
        self.name = "Claude (Anthropic)"
        self._client = None

    def _get_client(self):
        """Inicializa cliente Anthropic."""
        if self._client is None:
            from anthropic import Anthropic
            if not self.api_key:
                raise ErroConsultor("API key da Anthropic não configurada")
            self._client = Anthropic(api_key=self.api_key)
        return self._client

    def is_available(self) -> bool:
        """Verifica se API está configurada e respondendo."""
        if not self.api_key:
            return False
        try:
            self._get_client().messages.create(
                model=self.model,
                max_tokens=10,
                messages=[{"role": "user", "content": "ok"}]
            )
            return True
        except Exception as e:
            logger.warning("Claude indisponível: %s", e)
            return False

    def chat(self,
             messages: list,
             system_prompt: str = "",
             temperature: float = 0.4,
             stream: bool = False,
             max_tokens: int = 4096):
        """
        Envia mensagem para Claude.

        Args:
            messages: Lista de mensagens
            system_prompt: Prompt de sistema
            temperature: Criatividade (0-1)
            stream: Se True, retorna generator
            max_tokens: Máximo de tokens na resposta
        """
        client = self._get_client()

        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": messages,
            "temperature": temperature,
        }

        if system_prompt:
            kwargs["system"] = system_prompt

        if stream:
            return self._chat_stream(client, kwargs)
        return self._chat_sync(client, kwargs)

    def _chat_sync(self, client, kwargs: dict) -> str:
        """Chat síncrono."""
        try:
            response = client.messages.create(**kwargs)
        except Exception as e:
            raise ErroConsultor(f"Erro na comunicação com Claude: {e}") from e
        return response.content[0].text

    def _chat_stream(self, client, kwargs: dict) -> Generator[str, None, None]:
        """Chat com streaming."""
        try:
            with client.messages.stream(**kwargs) as stream:
                for text in stream.text_stream:
                    yield text
        except Exception as e:
            raise ErroConsultor(f"Erro na comunicação com Claude: {e}") from e

    def generate(self, prompt: str, system_prompt: str = "") -> str:
        """Geração simples."""
        messages = [{"role": "user", "content": prompt}]
        return self.chat(messages, system_prompt)


# Modelos disponíveis
MODELOS_CLAUDE = {
    "claude-sonnet-4-20250514": {
        "nome": "Claude Sonnet 4",
        "qualidade": "⭐⭐⭐⭐⭐",
        "velocidade": "Rápida",
        "recomendado": True
    },
    "claude-3-5-haiku-20241022": {
        "nome": "Claude Haiku 3.5",
        "qualidade": "⭐⭐⭐⭐",
        "velocidade": "Muito Rápida",
        "recomendado": False,
        "descricao": "Mais barato, bom para volume alto"
    },
}
