"""
Provider Ollama - IA Local Gratuita
Roda modelos como Llama, Mistral, Qwen localmente
"""

import json
import logging
from typing import Generator

import requests

from config import OLLAMA_BASE_URL
from ..erros import ErroConsultor

logger = logging.getLogger(__name__)


class OllamaProvider:
    """
    Provider para Ollama (IA local).

    Requisitos:
    1. Instalar Ollama: https://ollama.ai
    2. Baixar modelo: ollama pull qwen2.5:7b
    3. Iniciar servidor: ollama serve
    """

    def __init__(self,
                 base_url: str = OLLAMA_BASE_URL,
                 model: str = "qwen2.5:7b",
                 timeout: int = 120):
        self.base_url = base_url
        self.model = model
        self.timeout = timeout
        self.name = "Ollama (Local)"

    def is_available(self) -> bool:
        """Verifica se Ollama está rodando."""
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=5)
            return response.status_code == 200
        except requests.RequestException:
            return False

    def list_models(self) -> list:
        """Lista modelos disponíveis."""
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=10)
        except requests.RequestException as e:
            logger.warning("Não foi possível listar modelos Ollama: %s", e)
            return []
        if response.status_code != 200:
            return []
        return [m['name'] for m in response.json().get('models', [])]

    def has_model(self, model_name: str = None) -> bool:
        """Verifica se o modelo está instalado (nome exato ou parcial)."""
        model = model_name or self.model
        return any(model in m or m in model for m in self.list_models())

    def chat(self,
             messages: list,
             system_prompt: str = "",
             temperature: float = 0.4,
             stream: bool = False):
        """
        Envia mensagem para o modelo.

        Args:
            messages: Lista de mensagens [{"role": "user", "content": "..."}]
            system_prompt: Prompt de sistema
            temperature: Criatividade (0-1)
            stream: Se True, retorna generator

        Returns:
            Resposta do modelo (str ou generator)
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": stream,
            "options": {
                "temperature": temperature,
                "num_ctx": 8192,
            }
        }

        if system_prompt:
            payload["messages"] = [
                {"role": "system", "content": system_prompt}
            ] + messages

        if stream:
            return self._chat_stream(payload)

        try:
            return self._chat_sync(payload)
        except requests.ConnectionError as e:
            raise ErroConsultor(
                "Ollama não está rodando! Execute 'ollama serve' e tente novamente."
            ) from e
        except requests.RequestException as e:
            raise ErroConsultor(f"Erro na comunicação com Ollama: {e}") from e

    def _chat_sync(self, payload: dict) -> str:
        """Chat síncrono - aguarda resposta completa."""
        response = requests.post(
            f"{self.base_url}/api/chat",
            json=payload,
            timeout=self.timeout
        )

        if response.status_code != 200:
            raise ErroConsultor(f"Erro Ollama: {response.status_code} - {response.text}")

        data = response.json()
        return data.get('message', {}).get('content', '')

    def _chat_stream(self, payload: dict) -> Generator[str, None, None]:
        """Chat com streaming - retorna tokens conforme são gerados."""
        response = requests.post(
            f"{self.base_url}/api/chat",
            json=payload,
            stream=True,
            timeout=self.timeout
        )

        if response.status_code != 200:
            raise ErroConsultor(f"Erro Ollama: {response.status_code}")

        for line in response.iter_lines():
            if not line:
                continue
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                continue
            content = data.get('message', {}).get('content', '')
            if content:
                yield content

    def generate(self, prompt: str, system_prompt: str = "") -> str:
        """Geração simples (sem histórico de chat)."""
        messages = [{"role": "user", "content": prompt}]
        return self.chat(messages, system_prompt)


# Modelos recomendados (português + raciocínio numérico)
MODELOS_RECOMENDADOS = {
    "qwen2.5:7b": {
        "nome": "Qwen 2.5 7B",
        "ram": "8GB",
        "qualidade": "⭐⭐⭐⭐⭐",
        "velocidade": "Média",
        "descricao": "Melhor para português e raciocínio"
    },
    "llama3.1:8b": {
        "nome": "Llama 3.1 8B",
        "ram": "8GB",
        "qualidade": "⭐⭐⭐⭐",
        "velocidade": "Média",
        "descricao": "Bom equilíbrio geral"
    },
    "phi3:mini": {
        "nome": "Phi-3 Mini",
        "ram": "4GB",
        "qualidade": "⭐⭐⭐",
        "velocidade": "Muito Rápida",
        "descricao": "Leve, para PCs mais fracos"
    },
}


def verificar_instalacao(provider: OllamaProvider = None) -> dict:
    """
    Verifica status completo da instalação Ollama.
    Retorna dict com status e instruções se necessário.
    """
    provider = provider or OllamaProvider()

    result = {
        "ollama_rodando": False,
        "modelo_disponivel": False,
        "modelos_instalados": [],
        "modelo_atual": provider.model,
        "pronto": False,
        "instrucoes": []
    }

    if not provider.is_available():
        result["instrucoes"].append(
            "Ollama não está rodando.\n\n"
            "1. Instale: https://ollama.ai/download\n"
            "2. Execute: ollama serve\n"
            f"3. Baixe modelo: ollama pull {provider.model}"
        )
        return result

    result["ollama_rodando"] = True
    result["modelos_instalados"] = provider.list_models()

    if any(provider.model in m or m in provider.model for m in result["modelos_instalados"]):
        result["modelo_disponivel"] = True
        result["pronto"] = True
    else:
        result["instrucoes"].append(
            f"Modelo '{provider.model}' não encontrado.\n"
            f"Execute: ollama pull {provider.model}"
        )

    return result
