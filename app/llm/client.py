import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Optional

import requests

from app.core.config import settings
from app.core.exceptions import BackendProtocolError, BackendStreamError
from app.core.logging import get_logger

logger = get_logger(__name__)


class CompletionStream(ABC):
    """An open, line-delimited streaming response from a generation backend"""

    @abstractmethod
    def iter_lines(self) -> Iterator[bytes]:
        """Yield raw lines; raises BackendStreamError on a read failure"""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying connection"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class LLMClient(ABC):
    """Abstract base class for LLM clients"""

    model: str

    @abstractmethod
    def open_stream(self, prompt: str, **kwargs) -> CompletionStream:
        """Start a streaming completion for the prompt"""
        pass

    def check_connection(self) -> bool:
        """Best-effort reachability check"""
        return True


class OllamaStream(CompletionStream):
    """Streaming ``/api/generate`` response"""

    def __init__(self, response: requests.Response):
        self._response = response

    def iter_lines(self) -> Iterator[bytes]:
        try:
            # chunk_size=None hands over each chunk as soon as it arrives
            for line in self._response.iter_lines(chunk_size=None):
                yield line
        except requests.exceptions.RequestException as e:
            logger.error(f"Error reading streaming response: {e}")
            raise BackendStreamError(e)

    def close(self) -> None:
        self._response.close()


class OllamaClient(LLMClient):
    """Ollama LLM client"""

    def __init__(
        self,
        base_url: str = settings.OLLAMA_BASE_URL,
        model: str = settings.LLM_MODEL_NAME,
        temperature: float = settings.LLM_TEMPERATURE,
        top_p: float = settings.LLM_TOP_P,
        connect_timeout: float = settings.LLM_CONNECT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Ollama LLM client

        Args:
            base_url: Ollama server base URL
            model: Model name (e.g., 'deepseek-r1:7b')
            temperature: Sampling temperature (0.0 to 2.0)
            top_p: Nucleus sampling parameter
            connect_timeout: Seconds allowed to establish the connection
            session: Optional requests session to send through
        """
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.top_p = top_p
        self.connect_timeout = connect_timeout
        self.session = session or requests.Session()

        logger.info(f"Initialized Ollama client with model: {self.model}")

    def _build_payload(self, prompt: str, **kwargs) -> Dict[str, Any]:
        """Build request payload for Ollama"""
        temperature = kwargs.get("temperature")
        top_p = kwargs.get("top_p")
        return {
            "model": self.model,
            "prompt": prompt,
            "stream": True,
            "options": {
                "temperature": self.temperature if temperature is None else temperature,
                "top_p": self.top_p if top_p is None else top_p,
            },
        }

    def open_stream(self, prompt: str, **kwargs) -> OllamaStream:
        """
        Open a streaming completion via Ollama

        Args:
            prompt: Full prompt
            **kwargs: Optional overrides (temperature, top_p)

        Returns:
            OllamaStream over the NDJSON response body

        Raises:
            BackendProtocolError: If the payload cannot be encoded, the
                connection fails or the server answers with an error status
        """
        try:
            body = json.dumps(self._build_payload(prompt, **kwargs))
        except (TypeError, ValueError) as e:
            logger.error(f"Error encoding generation request: {e}")
            raise BackendProtocolError("Failed to encode generation request", e)

        logger.debug(f"Streaming response with model: {self.model}")
        try:
            response = self.session.post(
                f"{self.base_url}/api/generate",
                data=body,
                headers={"Content-Type": "application/json"},
                timeout=(self.connect_timeout, None),
                stream=True,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to connect to Ollama at {self.base_url}: {e}")
            raise BackendProtocolError(f"Failed to connect to generation backend: {e}", e)

        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            response.close()
            logger.error(f"Ollama rejected generation request: {e}")
            raise BackendProtocolError(f"Generation backend returned an error: {e}", e)

        return OllamaStream(response)

    def check_connection(self) -> bool:
        """Verify connection to Ollama server"""
        try:
            response = self.session.get(
                f"{self.base_url}/api/tags",
                timeout=self.connect_timeout
            )
            response.raise_for_status()
            models = response.json().get("models", [])
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"Ollama health check failed: {e}")
            return False

        model_names = [m.get("name", "") for m in models]
        if self.model not in model_names:
            logger.warning(
                f"Model '{self.model}' not found in Ollama. "
                f"Available models: {model_names}. "
                f"Pull it with: ollama pull {self.model}"
            )
        return True


class LLMClientFactory:
    """Factory for creating LLM clients"""

    _clients = {
        "ollama": OllamaClient,
    }

    @classmethod
    def create_client(
        cls,
        client_type: str = settings.LLM_TYPE,
        **kwargs
    ) -> LLMClient:
        """
        Create LLM client instance

        Args:
            client_type: Type of client ('ollama')
            **kwargs: Additional arguments for client initialization

        Returns:
            LLMClient instance

        Raises:
            ValueError: If client type is not supported
        """
        if client_type not in cls._clients:
            raise ValueError(
                f"Unsupported LLM client type: {client_type}. "
                f"Supported types: {list(cls._clients.keys())}"
            )

        client_class = cls._clients[client_type]
        logger.info(f"Creating {client_type} LLM client")
        return client_class(**kwargs)
