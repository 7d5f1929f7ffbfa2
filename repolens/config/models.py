from pydantic import BaseModel, Field
from typing import Literal

# Hard ceiling on captured text per file, independent of configuration.
MAX_CONTENT_CHARS = 100_000


class IngestConfig(BaseModel):
    ignore_names: list[str] = Field(default_factory=lambda: [
        "node_modules", ".git", ".next", "dist", "build",
        "package-lock.json", "yarn.lock", ".DS_Store",
    ])
    hidden_prefix: str = "."
    binary_media_prefixes: list[str] = Field(default_factory=lambda: ["image", "audio", "video"])
    max_content_chars: int = Field(default=MAX_CONTENT_CHARS, gt=0, le=MAX_CONTENT_CHARS)
    max_depth: int = Field(default=64, ge=0)
    max_concurrent_reads: int = Field(default=32, gt=0)


class ContextConfig(BaseModel):
    tree_max_depth: int = Field(default=4, ge=0)
    manifest_names: list[str] = Field(default_factory=lambda: [
        "package.json", "pom.xml", "pyproject.toml", "requirements.txt",
        "Cargo.toml", "go.mod", "build.gradle", "composer.json", "Gemfile",
    ])
    snippet_total_cap: int = Field(default=10_000, ge=0)
    snippet_chars: int = Field(default=1000, ge=0)
    max_file_code_chars: int = Field(default=10_000, gt=0)
    max_manifest_chars: int = Field(default=4000, gt=0)


class LayoutConfig(BaseModel):
    node_width: float = Field(default=220, gt=0)
    node_height: float = Field(default=80, gt=0)
    rank_sep: float = Field(default=120, ge=0)
    node_sep: float = Field(default=60, ge=0)
    sweeps: int = Field(default=8, ge=0)


class LLMSettings(BaseModel):
    provider: Literal["anthropic", "openai", "google", "ollama", "auto"] = "anthropic"
    model: str = "claude-haiku-4-5-20251001"
    api_key_env: str = "ANTHROPIC_API_KEY"
    max_tokens: int = Field(default=4096, gt=0)
    temperature: float = Field(default=0.3, ge=0)
    timeout: int = Field(default=60, gt=0)
    max_retries: int = Field(default=2, ge=0)
    retry_delay: float = Field(default=1.0, ge=0)
    base_url: str | None = None


class OutputConfig(BaseModel):
    base_dir: str = "."


class RepolensConfig(BaseModel):
    ingest: IngestConfig = Field(default_factory=IngestConfig)
    context: ContextConfig = Field(default_factory=ContextConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
