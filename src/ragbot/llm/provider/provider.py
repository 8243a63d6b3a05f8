from abc import ABC, abstractmethod

import structlog

from ragbot.errors import LLMError
from ragbot.llm.provider.config import AbstractProviderConfig
from ragbot.llm.provider.types import Message, ProviderType, TextResponse

_logger = structlog.get_logger()


class AbstractProvider(ABC):
    def __init__(self, config: AbstractProviderConfig) -> None:
        self.config = config
        self.enabled = config.enabled

    @abstractmethod
    def identify(self) -> ProviderType: ...

    @abstractmethod
    def _complete(self, messages: list[Message]) -> TextResponse:
        """Backend call; SDK errors propagate to :meth:`complete`."""
        ...

    def complete(self, messages: list[Message]) -> TextResponse:
        """
        Send a conversation to the LLM and return its text reply.

        Args:
            messages: Ordered conversation, system messages first

        Returns:
            TextResponse with the completion and token usage

        Raises:
            LLMError: the backend failed, timed out or returned nothing usable
        """
        try:
            response = self._complete(messages)
        except LLMError:
            raise
        except Exception as e:
            _logger.warning(
                "llm_request_failed",
                provider=self.identify().value,
                model=self.config.model,
                error=str(e),
            )
            raise LLMError(f"{self.identify().value} completion failed: {e}") from e

        _logger.info(
            "llm_completion_finished",
            provider=self.identify().value,
            stop_reason=response.stop_reason,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )
        return response
