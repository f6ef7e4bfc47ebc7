from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LodbookSettings(BaseSettings):
    """Process-level configuration for lodbook builds.

    Environment variables are prefixed with LODBOOK_. Site-specific values
    (url, types, collections) live in the site's `_config.yml` instead.
    """

    model_config = SettingsConfigDict(env_prefix="LODBOOK_", extra="ignore")

    # --- Core ---
    log_level: str = Field(default="INFO", description="Python logging level")

    # --- Site layout ---
    config_path: str = Field(default="_config.yml", description="Site config, relative to the source dir")
    data_dir: str = Field(default="_data", description="Record files, relative to the source dir")
    pages_dir: str = Field(default="_pages", description="Rendered narrative pages")
    output_dir: str = Field(default="_site")

    # --- Narrative pages ---
    text_selector: str = Field(default="#text p", description="CSS selector for text blocks")
    quote_selector: str = Field(default="blockquote")
    context_words: int = Field(default=5, description="Words either side of a mention")
    inject_collection_styles: bool = False


settings = LodbookSettings()
