"""LLM Client for Groq API integration."""
import time
from dataclasses import dataclass
from typing import Dict, List, Optional
from groq import Groq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError
import logging

from config import GROQ_API_KEY, GENERATION_MODEL, GENERATION_TEMPERATURE
from services.errors import GenerationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a strict RAG assistant. Answer ONLY using the CONTEXT. "
    "If the CONTEXT does not contain the answer, say that you could not find it in the document. "
    "Cite sources like [1], [2] using the numbers shown in the CONTEXT, "
    "and include page numbers (e.g., p. X) next to each claim. "
    "Format citations as [1], [2], etc. at the end of relevant sentences."
)


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str


class LLMClient:
    """Client for generating grounded, cited answers with the Groq API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = GENERATION_MODEL,
        temperature: float = GENERATION_TEMPERATURE
    ):
        """
        Initialize LLM client with Groq API key.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
            model: Model name used for every request
            temperature: Sampling temperature, kept low for repeatable answers
        """
        self.api_key = api_key or GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY must be provided or set in environment")

        self.model = model
        self.temperature = temperature
        self.client = Groq(api_key=self.api_key)
        logger.info(f"LLMClient initialized successfully (model={model})")

    def generate(self, query: str, context: str) -> LLMResponse:
        """
        Generate an answer restricted to the given context.

        Args:
            query: User question
            context: Numbered context block from build_context

        Returns:
            LLMResponse with text, token counts, and latency

        Raises:
            GenerationError: Structured error with code, message, and details
        """
        start_time = time.time()
        model = self.model

        try:
            logger.debug(f"Generating response with model: {model}")

            response = self.client.chat.completions.create(
                model=model,
                messages=self.build_messages(query, context),
                temperature=self.temperature
            )

            latency_ms = int((time.time() - start_time) * 1000)

            text = response.choices[0].message.content or ""

            usage = getattr(response, "usage", None)
            tokens_input = getattr(usage, "prompt_tokens", 0) or 0
            tokens_output = getattr(usage, "completion_tokens", 0) or 0

            logger.info(
                f"Generated response: model={model}, "
                f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
                f"latency={latency_ms}ms"
            )

            return LLMResponse(
                text=text,
                tokens_input=tokens_input,
                tokens_output=tokens_output,
                latency_ms=latency_ms,
                model_used=model
            )

        except RateLimitError as e:
            raise self._error(
                "RATE_LIMIT_ERROR",
                f"Rate limit exceeded: {str(e)}",
                model, start_time, e
            )

        except AuthenticationError as e:
            raise self._error(
                "AUTHENTICATION_ERROR",
                f"Authentication failed: {str(e)}",
                model, start_time, e
            )

        except APITimeoutError as e:
            raise self._error(
                "TIMEOUT_ERROR",
                f"Request timed out: {str(e)}",
                model, start_time, e
            )

        except APIError as e:
            raise self._error(
                "API_ERROR",
                f"Groq API error: {str(e)}",
                model, start_time, e
            )

        except Exception as e:
            raise self._error(
                "UNKNOWN_ERROR",
                f"Unexpected error during generation: {str(e)}",
                model, start_time, e,
                error_type=type(e).__name__
            )

    @staticmethod
    def _error(
        code: str,
        message: str,
        model: str,
        start_time: float,
        original: Exception,
        **extra_details
    ) -> GenerationError:
        latency_ms = int((time.time() - start_time) * 1000)
        details = {
            "model": model,
            "latency_ms": latency_ms,
            "original_error": str(original),
            **extra_details
        }
        logger.error(
            f"Generation failed ({code}): model={model}, latency={latency_ms}ms, error={original}",
            exc_info=True,
            extra={"error_code": code, "error_details": details}
        )
        return GenerationError(message, code=code, details=details)

    @staticmethod
    def build_messages(query: str, context: str) -> List[Dict[str, str]]:
        """
        Build the chat messages for a grounded answer.

        Args:
            query: User question
            context: Numbered context block

        Returns:
            System and user messages for the chat completion call
        """
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": f"QUESTION: {query}\n\nCONTEXT:\n{context}"}
        ]
