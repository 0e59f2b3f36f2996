"""
AI provider configuration settings.

API keys and default models for the Gemini and OpenAI chat providers,
plus generation parameters for the command, copilot and extraction
endpoints.

Dependencies: pydantic, pydantic_settings
System role: Provider credentials and model defaults
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AIProviderSettings(BaseSettings):
    """Provider keys and generation defaults.

    Keys are read from ``GOOGLE_GENERATIVE_AI_API_KEY`` and
    ``OPENAI_API_KEY``; the remaining fields use the ``AI_`` prefix
    through their aliases.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    google_generative_ai_api_key: SecretStr | None = Field(
        default=None,
        description="Google Generative AI (Gemini) API key",
    )
    openai_api_key: SecretStr | None = Field(
        default=None,
        description="OpenAI API key",
    )

    default_gemini_model: str = Field(
        default="gemini-2.0-flash",
        alias="AI_DEFAULT_GEMINI_MODEL",
        description="Gemini model used when the request names none",
    )
    default_openai_model: str = Field(
        default="gpt-4o-mini",
        alias="AI_DEFAULT_OPENAI_MODEL",
        description="OpenAI model used when the request names none",
    )

    command_temperature: float | None = Field(
        default=None,
        alias="AI_COMMAND_TEMPERATURE",
        description="Temperature for command generation (provider default when unset)",
    )
    copilot_temperature: float = Field(
        default=0.7,
        alias="AI_COPILOT_TEMPERATURE",
        description="Temperature for copilot completions",
    )
    copilot_max_output_tokens: int = Field(
        default=50,
        alias="AI_COPILOT_MAX_OUTPUT_TOKENS",
        description="Output token cap for copilot completions",
    )
    copilot_timeout_seconds: float = Field(
        default=30.0,
        alias="AI_COPILOT_TIMEOUT_SECONDS",
        description="Copilot completions exceeding this are answered with 408",
    )
    extraction_temperature: float = Field(
        default=0.2,
        alias="AI_EXTRACTION_TEMPERATURE",
        description="Temperature for page image extraction",
    )
    extraction_max_output_tokens: int = Field(
        default=4096,
        alias="AI_EXTRACTION_MAX_OUTPUT_TOKENS",
        description="Output token cap for page image extraction",
    )
    extraction_fetch_timeout_seconds: float = Field(
        default=30.0,
        alias="AI_EXTRACTION_FETCH_TIMEOUT_SECONDS",
        description="Timeout for downloading page images given by URL",
    )

    @property
    def has_gemini_key(self) -> bool:
        """Whether a non-empty Gemini key is configured."""
        return bool(
            self.google_generative_ai_api_key
            and self.google_generative_ai_api_key.get_secret_value()
        )

    @property
    def has_openai_key(self) -> bool:
        """Whether a non-empty OpenAI key is configured."""
        return bool(self.openai_api_key and self.openai_api_key.get_secret_value())

    @property
    def has_any_key(self) -> bool:
        return self.has_gemini_key or self.has_openai_key
