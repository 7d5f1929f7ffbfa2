"""Shared test fixtures for repolens."""

from __future__ import annotations

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from repolens.ingest.models import Entry
from repolens.llm.base import LLMProvider
from repolens.llm.models import LLMConfig, LLMResponse, TokenUsage


class FakeFile:
    """In-memory file handle with optional latency, gate, or read error."""

    kind = "file"

    def __init__(
        self,
        name: str,
        text: str = "",
        media_type: str = "text/plain",
        *,
        delay: float = 0.0,
        gate: asyncio.Event | None = None,
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self.text = text
        self.media_type = media_type
        self.delay = delay
        self.gate = gate
        self.error = error
        self.reads = 0
        self.limits: list[int | None] = []

    async def read_text(self, limit: int | None = None) -> str:
        self.reads += 1
        self.limits.append(limit)
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


class FakeDir:
    """In-memory directory handle yielding its children in list order."""

    kind = "directory"

    def __init__(self, name: str, children: list | None = None, *, error: Exception | None = None) -> None:
        self.name = name
        self.children = children or []
        self.error = error

    async def entries(self):
        for child in self.children:
            yield child.name, child
        if self.error is not None:
            raise self.error


def make_dir(name: str, layout: dict) -> FakeDir:
    """Build a FakeDir from a nested dict: str values are files, dicts are directories."""
    children = []
    for child_name, value in layout.items():
        if isinstance(value, dict):
            children.append(make_dir(child_name, value))
        else:
            children.append(FakeFile(child_name, value))
    return FakeDir(name, children)


def file_entry(path: str, content: str | None = "x") -> Entry:
    return Entry(name=path.rsplit("/", 1)[-1], kind="file", path=path, content=content)


def dir_entry(path: str, *children: Entry) -> Entry:
    return Entry(name=path.rsplit("/", 1)[-1], kind="directory", path=path, children=children)


@pytest.fixture
def sample_forest():
    """A small web-app shaped project."""
    return (
        dir_entry(
            "/src",
            dir_entry(
                "/src/models",
                file_entry("/src/models/UserModel.ts", "export class UserModel {}"),
                file_entry("/src/models/UserModel.test.ts", "describe('UserModel')"),
            ),
            file_entry("/src/utils.ts", "export const noop = () => {}"),
            file_entry("/src/server.js", "const app = express()"),
            file_entry("/src/AppController.ts", "export class AppController {}"),
        ),
        file_entry(
            "/package.json",
            '{"name": "demo", "dependencies": {"express": "^4.18.0", "react": "^18.0.0"}}',
        ),
        file_entry("/README.md", "# Demo"),
    )


@pytest.fixture
def mock_llm_provider():
    provider = MagicMock(spec=LLMProvider)
    provider.config = LLMConfig(provider="anthropic", model="test-model")
    provider.generate = AsyncMock(
        return_value=LLMResponse(
            content="# Demo\n\n## Introduction\nA demo project.",
            usage=TokenUsage(input_tokens=100, output_tokens=250),
            model="test-model",
        )
    )
    return provider
