"""
Provider and model resolution.

Pure decision function mapping the requested model string, requested
provider and key availability to the provider and model that will serve
the request.

Dependencies: None (pure domain layer)
System role: Provider selection decision table
"""

from dataclasses import dataclass
from enum import Enum


class Provider(str, Enum):
    """Supported chat providers."""

    GEMINI = "gemini"
    OPENAI = "openai"


# Model string prefixes ("<prefix>/<name>") and the provider they select
MODEL_PREFIXES: dict[str, Provider] = {
    "openai": Provider.OPENAI,
    "google": Provider.GEMINI,
    "gemini": Provider.GEMINI,
}


@dataclass(frozen=True)
class ProviderResolution:
    """
    Result of provider resolution.

    Attributes:
        provider: Provider serving the request
        model: Explicit model name, or None to use the provider default
        fell_back: True when the requested provider had no key and the
            other provider was used instead
    """

    provider: Provider
    model: str | None = None
    fell_back: bool = False

    def model_name(self, default_gemini: str, default_openai: str) -> str:
        """Return the explicit model or the provider's default."""
        if self.model:
            return self.model
        if self.provider is Provider.GEMINI:
            return default_gemini
        return default_openai


def _parse_provider(value: str | None) -> Provider | None:
    try:
        return Provider(value) if value else None
    except ValueError:
        return None


def resolve_provider(
    model: str | None,
    provider: str | None,
    has_gemini_key: bool,
    has_openai_key: bool,
) -> ProviderResolution:
    """
    Resolve which provider and model serve a request.

    Rules, in order:
        1. A ``"<prefix>/<name>"`` model selects the provider by prefix
           (``openai``, ``google`` or ``gemini``). An unknown prefix drops
           the model name.
        2. Otherwise an explicit, supported ``provider`` is used.
        3. Otherwise Gemini when its key exists, else OpenAI.
        4. If the chosen provider has no key but the other one does, the
           other provider is used and the model name is dropped since it
           may not exist there.

    Args:
        model: Requested model, optionally provider-prefixed
        provider: Requested provider name
        has_gemini_key: Whether a Gemini key is configured
        has_openai_key: Whether an OpenAI key is configured

    Returns:
        ProviderResolution: Selected provider and model
    """
    selected: Provider | None = None
    model_name = model or None

    if model and "/" in model:
        prefix, _, name = model.partition("/")
        selected = MODEL_PREFIXES.get(prefix)
        model_name = name if selected else None

    if selected is None:
        selected = _parse_provider(provider)

    if selected is None:
        selected = Provider.GEMINI if has_gemini_key else Provider.OPENAI

    if selected is Provider.OPENAI and not has_openai_key and has_gemini_key:
        return ProviderResolution(provider=Provider.GEMINI, model=None, fell_back=True)
    if selected is Provider.GEMINI and not has_gemini_key and has_openai_key:
        return ProviderResolution(provider=Provider.OPENAI, model=None, fell_back=True)

    return ProviderResolution(provider=selected, model=model_name or None)
