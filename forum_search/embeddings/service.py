"""Embedding service interface and implementations."""

import time
from abc import ABC, abstractmethod

import httpx

from forum_search.config import EmbeddingSettings, get_settings
from forum_search.embeddings.mock import mock_embedding
from forum_search.embeddings.models import EmbeddingResult
from forum_search.exceptions import EmbeddingError, ErrorCode
from forum_search.logging_config import get_logger
from forum_search.observability.metrics import (
    track_embedding_fallback,
    track_embedding_request,
)

logger = get_logger(__name__)


class EmbeddingService(ABC):
    """Abstract base class for embedding services.

    Defines the interface for generating text embeddings.
    """

    @abstractmethod
    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        Args:
            text: Text to embed.

        Returns:
            EmbeddingResult with vector.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts.

        Args:
            texts: List of texts to embed.

        Returns:
            List of EmbeddingResult objects.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name used for embeddings."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Get the embedding dimensions."""
        ...

    async def close(self) -> None:
        """Release any held resources."""
        return None


class HTTPEmbeddingService(EmbeddingService):
    """Embedding service using an OpenAI-compatible HTTP API."""

    def __init__(
        self,
        settings: EmbeddingSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the HTTP embedding service.

        Args:
            settings: Embedding configuration. Uses defaults if not provided.
            client: HTTP client. Creates new one if not provided.
        """
        self._settings = settings or get_settings().embedding
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {}
            if self._settings.api_key is not None:
                headers["Authorization"] = (
                    f"Bearer {self._settings.api_key.get_secret_value()}"
                )
            self._client = httpx.AsyncClient(
                timeout=self._settings.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    @property
    def dimensions(self) -> int:
        """Get embedding dimensions."""
        return self._settings.dimensions

    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        Args:
            text: Text to embed.

        Returns:
            EmbeddingResult with vector.

        Raises:
            EmbeddingError: If embedding fails.
        """
        results = await self.embed_batch([text])
        if not results:
            raise EmbeddingError(
                "Embedding service returned no vectors",
                details={"model": self._settings.model},
            )
        return results[0]

    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts.

        Args:
            texts: List of texts to embed.

        Returns:
            List of EmbeddingResult objects.

        Raises:
            EmbeddingError: If embedding fails.
        """
        if not texts:
            return []

        client = await self._get_client()
        url = f"{self._settings.base_url.rstrip('/')}/embeddings"

        all_results: list[EmbeddingResult] = []
        batch_size = self._settings.batch_size

        for i in range(0, len(texts), batch_size):
            batch = texts[i : i + batch_size]
            started = time.perf_counter()
            try:
                batch_results = await self._embed_batch_request(client, url, batch)
            except EmbeddingError:
                track_embedding_request(
                    provider="http",
                    duration=time.perf_counter() - started,
                    success=False,
                )
                raise
            track_embedding_request(
                provider="http",
                duration=time.perf_counter() - started,
            )
            all_results.extend(batch_results)

        return all_results

    async def _embed_batch_request(
        self,
        client: httpx.AsyncClient,
        url: str,
        texts: list[str],
    ) -> list[EmbeddingResult]:
        """Make embedding request for a batch.

        Args:
            client: HTTP client.
            url: Embedding endpoint URL.
            texts: Batch of texts.

        Returns:
            List of EmbeddingResult objects.

        Raises:
            EmbeddingError: If request fails.
        """
        payload = {
            "input": texts,
            "model": self._settings.model,
        }

        try:
            response = await client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Embedding request failed: {e.response.status_code}",
                extra={"url": url, "status": e.response.status_code},
            )
            raise EmbeddingError(
                f"Embedding service returned {e.response.status_code}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            logger.error(
                f"Embedding request error: {e}",
                extra={"url": url},
            )
            raise EmbeddingError(
                f"Failed to connect to embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"url": url},
            ) from e

        try:
            data = response.json()
            embeddings = sorted(data["data"], key=lambda item: item.get("index", 0))

            results: list[EmbeddingResult] = []
            for i, emb_data in enumerate(embeddings):
                embedding = emb_data["embedding"]
                results.append(
                    EmbeddingResult(
                        text=texts[i],
                        embedding=embedding,
                        model=self._settings.model,
                        dimensions=len(embedding),
                    )
                )

        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            raise EmbeddingError(
                f"Invalid response from embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"error": str(e)},
            ) from e

        for result in results:
            if result.dimensions != self.dimensions:
                raise EmbeddingError(
                    f"Expected {self.dimensions} dimensions, got {result.dimensions}",
                    code=ErrorCode.EMBEDDING_DIMENSION_MISMATCH,
                    details={
                        "expected": self.dimensions,
                        "actual": result.dimensions,
                        "model": self._settings.model,
                    },
                )

        return results


class MockEmbeddingService(EmbeddingService):
    """Deterministic embeddings derived from a hash of the text."""

    MODEL_NAME = "mock-hash"

    def __init__(self, dimensions: int = 1536) -> None:
        self._dimensions = dimensions

    @property
    def model_name(self) -> str:
        return self.MODEL_NAME

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def embed(self, text: str) -> EmbeddingResult:
        vector = mock_embedding(text, self._dimensions)
        return EmbeddingResult(
            text=text,
            embedding=vector,
            model=self.MODEL_NAME,
            dimensions=len(vector),
            mocked=True,
        )

    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        return [await self.embed(text) for text in texts]


class FallbackEmbeddingService(EmbeddingService):
    """Provider embeddings with a deterministic fallback.

    Uses ``primary`` when one is configured. Any provider failure is logged
    and answered from the mock generator instead, so ``embed`` never raises.
    """

    def __init__(
        self,
        primary: EmbeddingService | None,
        fallback: MockEmbeddingService | None = None,
    ) -> None:
        """Initialize the fallback wrapper.

        Args:
            primary: Real provider, or None when no credential is configured.
            fallback: Mock generator. Defaults to one matching the primary's
                dimensions.
        """
        self._primary = primary
        dimensions = primary.dimensions if primary is not None else 1536
        self._fallback = fallback or MockEmbeddingService(dimensions=dimensions)

    @classmethod
    def from_settings(cls, settings: EmbeddingSettings) -> "FallbackEmbeddingService":
        """Build the service, enabling the HTTP provider only with a credential."""
        primary = HTTPEmbeddingService(settings) if settings.is_configured else None
        return cls(primary, MockEmbeddingService(dimensions=settings.dimensions))

    @property
    def is_configured(self) -> bool:
        """Whether a real provider is available."""
        return self._primary is not None

    @property
    def model_name(self) -> str:
        if self._primary is not None:
            return self._primary.model_name
        return self._fallback.model_name

    @property
    def dimensions(self) -> int:
        return self._fallback.dimensions

    async def embed(self, text: str) -> EmbeddingResult:
        if self._primary is None:
            return await self._fallback.embed(text)

        try:
            return await self._primary.embed(text)
        except EmbeddingError as e:
            logger.warning(
                f"Embedding provider failed, using mock embedding: {e.message}",
                extra={"error_code": e.code.value, "model": self._primary.model_name},
            )
            track_embedding_fallback(self._primary.model_name)
            return await self._fallback.embed(text)

    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        if self._primary is None:
            return await self._fallback.embed_batch(texts)

        try:
            return await self._primary.embed_batch(texts)
        except EmbeddingError as e:
            logger.warning(
                f"Embedding provider failed for batch, using mock embeddings: {e.message}",
                extra={"error_code": e.code.value, "batch_size": len(texts)},
            )
            return await self._fallback.embed_batch(texts)

    async def close(self) -> None:
        if self._primary is not None:
            await self._primary.close()
