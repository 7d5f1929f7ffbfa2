"""Prompt templates for README and single-file documentation generation."""

from __future__ import annotations

from repolens.context.models import ProjectContext, TruncationConfig

README_SYSTEM_TEMPLATE = """\
You are a Senior Software Architect.
Generate a COMPREHENSIVE README.md for the project titled "{title}".

# Guidelines
1. **Title**: Use "{title}" as the main H1 title.
2. **Domain Analysis**: Analyze the 'Code Snippets' to write a specific Introduction \
(e.g., if you see 'MoodEntry', explain it's a Mood Tracker).
3. **Tech Stack**: List languages/libs found in 'Dependencies'.

# Required Output Structure:
# {title}
## Introduction
[Write 2-3 sentences about what the app does based on the code]

## Key Features
[Bullet points derived from class names like 'AuthController' -> 'User Authentication']

## Tech Stack
[List from dependencies]

## Project Structure
[Briefly describe key folders]

Do not include conversational filler. Output only Markdown.\
"""

FILE_DOCS_SYSTEM = (
    "You are a technical documentation expert. "
    "Write a detailed README section for this file."
)

_SECTIONS: list[tuple[str, str]] = [
    ("file_tree", "--- FILE STRUCTURE ---\n{value}"),
    ("manifest", "--- DEPENDENCIES ---\n{value}"),
    ("dependencies_list", "--- DEPENDENCY NAMES ---\n{value}"),
    ("snippets", "--- CODE SNIPPETS (Logic Analysis) ---\n{value}"),
]


class PromptTemplate:
    """Renders system/user prompts from a ProjectContext with truncation."""

    def __init__(self, truncation: TruncationConfig | None = None) -> None:
        self.truncation = truncation or TruncationConfig()

    def render_readme(self, context: ProjectContext) -> tuple[str, str]:
        """Return (system_prompt, user_prompt). The context is not mutated."""
        truncated = self._apply_truncation(context)
        system = README_SYSTEM_TEMPLATE.format(title=truncated.title)
        parts = []
        for field_name, template in _SECTIONS:
            value = getattr(truncated, field_name)
            if value:
                parts.append(template.format(value=value))
        return system, "\n\n".join(parts)

    def render_file_docs(self, code: str, filename: str) -> tuple[str, str]:
        code = code[: self.truncation.max_file_code_chars]
        return FILE_DOCS_SYSTEM, f"Filename: {filename}\nCode:\n{code}"

    def _apply_truncation(self, context: ProjectContext) -> ProjectContext:
        limit = self.truncation.max_manifest_chars
        if len(context.manifest) > limit:
            return context.model_copy(
                update={"manifest": context.manifest[:limit] + "\n... (truncated)"}
            )
        return context
