"""Jinja2 rendering of generated module skeletons."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

_DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


class TemplateRenderer:
    """Renders module preambles and whole files from ``*.py.j2`` templates.

    A custom ``templates_dir`` is searched before the bundled templates, so a
    project can override a single file (for example ``aggregate.py.j2``).
    """

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def render(self, template_name: str, **context: object) -> str:
        template = self._env.get_template(template_name)
        text = template.render(**context)
        return text if text.endswith("\n") else text + "\n"

    @staticmethod
    def _create_env(templates_dir: Optional[Path]) -> Environment:
        directories: List[str] = []
        if templates_dir is not None:
            directories.append(str(templates_dir))
        if str(_DEFAULT_TEMPLATES_DIR) not in directories:
            directories.append(str(_DEFAULT_TEMPLATES_DIR))
        return Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )


__all__ = ["TemplateRenderer"]
