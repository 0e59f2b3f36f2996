"""
Extraction service.

Turns scanned page images (PDF pages rendered client-side, photos) into
HTML the editor can import. Images arrive inline as base64 or as URLs to
download; the model output is streamed back as plain text chunks.

Dependencies: httpx, langchain_core, afribac_ai.core.providers, afribac_ai.observability
System role: Page image OCR and structuring
"""

import base64
import logging
import time
from collections.abc import AsyncGenerator, Sequence

import httpx
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from afribac_ai.core.exceptions import ConfigurationError, ImageInputError
from afribac_ai.core.providers import ChatModelFactory, ProviderResolution, resolve_provider
from afribac_ai.models.chat import coerce_message_content
from afribac_ai.models.extraction import ExtractionRequest
from afribac_ai.observability.usage import AIServiceType, AIUsageStatus, log_ai_usage

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MIME_TYPE = "image/png"

EXTRACTION_SYSTEM_PROMPT = """\
Tu es un expert de la numérisation de documents (OCR et structuration).

Objectif : produire un HTML complet, sans CSS, qui représente fidèlement la page dans l’ordre de lecture.

Règles de sortie :
- Retourne uniquement du HTML : ni Markdown, ni texte conversationnel.
- Utilise des balises standard : <h1> à <h6>, <p>, <ul>/<ol>/<li>, <table> pour les tableaux, <blockquote>.
- Écris les formules en LaTeX entre $...$ (en ligne) ou $$...$$ (bloc).
- Soigne l’indentation et les retours à la ligne.
- Ignore les numéros de page (par exemple « Page 1 » ou « 1/12 »).

IMPORTANT : ne saute aucun contenu non textuel.
Pour chaque schéma, figure, graphique, carte ou image annotée, ajoute un bloc dédié à sa place dans le flux :
  <h4>Figure : {titre s’il existe}</h4>
  <p>description claire</p>
  <ul><li>éléments et labels</li></ul>
- Décris ce qui est représenté : relations, flèches, étapes, légende.
- Recopie les labels et valeurs visibles : axes, unités, noms, annotations.
- Si un élément est en partie illisible, signale-le mais garde le bloc descriptif.
Crée un bloc par figure."""


def as_data_url(image: str, mime_type: str = DEFAULT_IMAGE_MIME_TYPE) -> str:
    """Wrap raw base64 in a data URL; data URLs pass through unchanged."""
    if image.startswith("data:"):
        return image
    return f"data:{mime_type};base64,{image}"


def build_extraction_messages(images: Sequence[str]) -> list[BaseMessage]:
    """
    Build the extraction conversation.

    Args:
        images: Page images as data URLs, in page order

    Returns:
        list[BaseMessage]: System instructions and one user message holding
        every page image
    """
    return [
        SystemMessage(content=EXTRACTION_SYSTEM_PROMPT),
        HumanMessage(content=[{"type": "image_url", "image_url": {"url": image}} for image in images]),
    ]


class ExtractionService:
    """Extracts HTML from page images."""

    def __init__(
        self,
        model_factory: ChatModelFactory,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize extraction service.

        Args:
            model_factory: Builds chat models for resolved providers
            transport: Optional httpx transport for image downloads
        """
        self._factory = model_factory
        self._transport = transport

    def resolve(self, request: ExtractionRequest) -> ProviderResolution:
        """
        Resolve provider and model for a request.

        Raises:
            ConfigurationError: If no provider key is configured
        """
        settings = self._factory.settings
        if not settings.has_any_key:
            raise ConfigurationError()
        return resolve_provider(
            model=request.model,
            provider=request.provider,
            has_gemini_key=settings.has_gemini_key,
            has_openai_key=settings.has_openai_key,
        )

    async def collect_images(self, request: ExtractionRequest) -> list[str]:
        """
        Gather the request images as data URLs.

        Inline images come first, then downloaded ones, each group in
        request order. Empty entries are skipped.

        Args:
            request: Inline images and image URLs

        Returns:
            list[str]: Data URLs, at least one

        Raises:
            ImageInputError: If a download fails or no image remains
        """
        images = [as_data_url(image) for image in request.images if image]
        urls = [url for url in request.image_urls if url]

        if urls:
            timeout = self._factory.settings.extraction_fetch_timeout_seconds
            async with httpx.AsyncClient(
                timeout=timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                for url in urls:
                    images.append(await self._download(client, url))

        if not images:
            raise ImageInputError()
        return images

    async def _download(self, client: httpx.AsyncClient, url: str) -> str:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Image download failed", extra={"url": url[:200], "error": str(e)})
            raise ImageInputError(
                f"Impossible de télécharger l’image : {url}",
                details={"url": url},
            ) from e

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        mime_type = content_type if content_type.startswith("image/") else DEFAULT_IMAGE_MIME_TYPE
        encoded = base64.b64encode(response.content).decode("ascii")
        return as_data_url(encoded, mime_type)

    async def stream_html(
        self,
        images: Sequence[str],
        resolution: ProviderResolution,
    ) -> AsyncGenerator[str, None]:
        """
        Stream the HTML extracted from page images.

        One usage record is written when the stream ends, whether it
        completed, failed or was closed early.

        Args:
            images: Page images as data URLs
            resolution: Provider and model to use

        Yields:
            str: Non-empty HTML text chunks
        """
        settings = self._factory.settings
        model_name = self._factory.model_name(resolution)
        model = self._factory.create(
            resolution,
            temperature=settings.extraction_temperature,
            max_output_tokens=settings.extraction_max_output_tokens,
        )

        logger.info(
            "Extraction started",
            extra={
                "provider": resolution.provider.value,
                "model": model_name,
                "fell_back": resolution.fell_back,
                "image_count": len(images),
            },
        )

        start = time.perf_counter()
        status = AIUsageStatus.SUCCESS
        error_message = None
        output_chars = 0
        try:
            async for chunk in model.astream(build_extraction_messages(images)):
                text = coerce_message_content(chunk.content)
                if text:
                    output_chars += len(text)
                    yield text
        except Exception as e:
            status = AIUsageStatus.ERROR
            error_message = str(e)
            raise
        finally:
            log_ai_usage(
                AIServiceType.EXTRACTION,
                resolution.provider.value,
                model_name,
                status,
                error_message=error_message,
                processing_time_ms=(time.perf_counter() - start) * 1000,
                metadata={"image_count": len(images), "output_chars": output_chars},
            )
