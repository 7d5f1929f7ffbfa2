"""Config file discovery and loading.

Files are searched in order: the ``--config`` path, ``./repolens.yaml``, then
``~/.repolens/config.yaml``. The first non-empty file wins; nothing is merged.
String values may reference the environment as ``${VAR}`` or
``${VAR:-default}``.
"""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import RepolensConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = "repolens.yaml"

_ENV_REF = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def config_search_paths(cli_path: str | None = None) -> list[Path]:
    paths = [Path(PROJECT_CONFIG_NAME), Path.home() / ".repolens" / "config.yaml"]
    if cli_path:
        paths.insert(0, Path(cli_path).expanduser())
    return paths


def load_config(cli_path: str | None = None) -> RepolensConfig:
    """Return the first usable config on the search path, or the defaults.

    Raises ValueError naming the file when it is unreadable YAML, not a
    mapping, or fails validation.
    """
    for path in config_search_paths(cli_path):
        if not path.is_file():
            continue
        raw = _read_yaml(path)
        if raw is None:
            continue
        try:
            config = RepolensConfig.model_validate(expand_env(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
        logger.debug("Loaded config from %s", path)
        return config
    return RepolensConfig()


def _read_yaml(path: Path) -> dict | None:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: top level must be a mapping")
    return raw


def expand_env(value):
    """Substitute environment references in every string inside *value*."""
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), value)
    if isinstance(value, dict):
        return {key: expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    return value


# Default YAML template for `repolens config init`
DEFAULT_CONFIG_TEMPLATE = """\
# repolens.yaml

# Directory scanning
ingest:
  hidden_prefix: "."
  max_content_chars: 100000    # per-file text cap (hard ceiling 100000)
  max_depth: 64                # recursion ceiling, guards against symlink loops
  max_concurrent_reads: 32
  # ignore_names: [node_modules, .git, .next, dist, build, package-lock.json, yarn.lock, .DS_Store]
  # binary_media_prefixes: [image, audio, video]

# Context extraction
context:
  tree_max_depth: 4
  snippet_total_cap: 10000
  snippet_chars: 1000
  max_file_code_chars: 10000
  max_manifest_chars: 4000

# Graph layout
layout:
  node_width: 220
  node_height: 80
  rank_sep: 120
  node_sep: 60
  sweeps: 8

# LLM Provider
llm:
  provider: "anthropic"        # anthropic | openai | google | ollama | auto
  model: "claude-haiku-4-5-20251001"
  api_key_env: "ANTHROPIC_API_KEY"
  max_tokens: 4096
  temperature: 0.3
  timeout: 60
  max_retries: 2               # retries on rate limits and overload
  retry_delay: 1.0

# Output
output:
  base_dir: "."

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
