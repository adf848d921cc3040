"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use LAYOUTSYNTAX_ prefix (e.g., LAYOUTSYNTAX_UNPROCESSED_POLICY=strip).

Settings can also be loaded from a .env file in the project root.
"""

from typing import List, Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use LAYOUTSYNTAX_ prefix. The OpenRouter key is
    also picked up from the conventional OPENROUTER_KEY variable.

    Examples:
        LAYOUTSYNTAX_SECTION_DELIMITER=+++
        LAYOUTSYNTAX_UNPROCESSED_POLICY=strip
        LAYOUTSYNTAX_AI_ENABLED=false
        OPENROUTER_KEY=sk-or-...
    """

    model_config = SettingsConfigDict(
        env_prefix="LAYOUTSYNTAX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Directive engine configuration
    section_delimiter: str = Field(
        default="---",
        description="Line that separates sections inside multi-section block directives",
    )

    default_priority: int = Field(
        default=100,
        description="Priority given to registrations that do not specify one (lower runs first)",
    )

    unprocessed_policy: Literal["warn", "strip"] = Field(
        default="warn",
        description="What to do with ::name lines no handler claimed: warn and keep, or strip",
    )

    # AI completion service
    ai_enabled: bool = Field(
        default=True,
        description="Resolve ::ai directives through the completion service",
    )

    ai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("LAYOUTSYNTAX_AI_API_KEY", "OPENROUTER_KEY"),
        description="OpenRouter API key",
    )

    ai_model: str = Field(
        default="anthropic/claude-3.5-sonnet",
        description="Default completion model",
    )

    ai_models: Optional[List[str]] = Field(
        default=None,
        description="Candidate models for OpenRouter multi-model routing",
    )

    ai_route: Optional[str] = Field(
        default=None,
        description="OpenRouter routing strategy used with ai_models (e.g. cheapest)",
    )

    ai_timeout: float = Field(
        default=60.0,
        description="Per-call timeout in seconds for a single completion",
    )

    ai_site_url: str = Field(
        default="https://standard.ffp.co",
        description="Site URL sent as Referer to OpenRouter",
    )

    ai_default_prompt: str = Field(
        default="Say hello",
        description="Prompt used by an ::ai block with neither body nor arguments",
    )

    # Markdown cleanup passes
    escape_code_blocks: List[str] = Field(
        default_factory=list,
        description="Fenced code block languages whose fences are removed before rendering",
    )

    # Built-in directives
    pygments_style: str = Field(
        default="monokai",
        description="Pygments style used by the ::code directive",
    )

    # CLI
    input_pattern: str = Field(
        default="**/*.md",
        description="Glob (relative to inputdir) selecting documents to process",
    )


# Singleton instance - import this in your code
appsettings = AppSettings()
