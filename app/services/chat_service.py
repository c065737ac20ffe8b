"""
Chat Service Module

Business logic layer for the shop assistant.
Handles:
- Catalog snapshot for grounding
- Prompt preparation
- Opening the generation stream
- Relaying the stream as server-sent events
"""

from typing import Callable, Iterator, Optional

from app.catalog.snapshot import CatalogSnapshotBuilder
from app.chat.prompt import PromptBuilder
from app.chat.relay import ChatRelay
from app.core.exceptions import BackendProtocolError, CatalogUnavailable
from app.core.logging import get_logger
from app.llm.client import LLMClient
from app.utils.sse import ServerSentEvent, error_event
from app.utils.text import truncate

logger = get_logger(__name__)


class ChatService:
    """
    Service for streaming shop-assistant answers.
    """

    def __init__(
        self,
        snapshot_builder: CatalogSnapshotBuilder,
        prompt_builder: PromptBuilder,
        llm_client: LLMClient,
    ):
        """Initialize chat service with its collaborators"""
        self.snapshot_builder = snapshot_builder
        self.prompt_builder = prompt_builder
        self.llm_client = llm_client

        logger.info("Initialized ChatService")

    def prepare_prompt(self, message: str) -> str:
        """
        Build the grounded prompt for a user message.

        Raises:
            CatalogUnavailable: If the catalog snapshot cannot be built
        """
        snapshot = self.snapshot_builder.build()
        return self.prompt_builder.build_chat_prompt(snapshot, message)

    def stream_chat(
        self,
        message: str,
        is_cancelled: Optional[Callable[[], bool]] = None,
    ) -> Iterator[ServerSentEvent]:
        """
        Stream the assistant's answer to one message.

        Failures before the backend stream is open end the stream with a
        single ``error`` event; the backend is called at most once.

        Args:
            message: User message
            is_cancelled: Non-blocking client-disconnect poll

        Yields:
            Server-sent events in backend order
        """
        logger.info(f"Chat request: {truncate(message, 100)}")

        try:
            prompt = self.prepare_prompt(message)
        except CatalogUnavailable as e:
            logger.error(f"Error preparing chat prompt: {e.message}")
            yield error_event(e.message)
            return

        if is_cancelled is not None and is_cancelled():
            logger.info("Client disconnected before the generation stream was opened")
            return

        try:
            stream = self.llm_client.open_stream(prompt)
        except BackendProtocolError as e:
            logger.error(f"Error opening generation stream: {e.message}")
            yield error_event(e.message)
            return

        relay = ChatRelay(is_cancelled=is_cancelled)
        yield from relay.relay(stream)
        logger.info(f"Chat stream ended: {relay.state.value}")
