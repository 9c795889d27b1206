"""
Jinja2 rendering for generated TypeScript.

Every generated fragment and declaration comes from a template directory;
undefined template variables are errors rather than empty strings.
"""

from typing import Dict, Any
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    select_autoescape,
)
from jinja2 import TemplateError as JinjaTemplateError


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


def doc_comment(value: Any) -> str:
    """Collapse text onto one line inside a JSDoc comment."""
    text = " ".join(str(value).split()).replace("*/", "*\\/")
    return f"/** {text} */"


class TemplateEngine:
    """Jinja2 environment bound to one template directory."""

    def __init__(self, template_dir: Path):
        if not template_dir.is_dir():
            raise TemplateError(f"Template directory not found: {template_dir}")

        self.template_dir = template_dir
        self._env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml"], default_for_string=False),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["doc_comment"] = doc_comment

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            return self._env.get_template(template_name).render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def template_exists(self, template_name: str) -> bool:
        try:
            self._env.get_template(template_name)
        except TemplateNotFound:
            return False
        return True


def create_template_engine(template_dir: Path) -> TemplateEngine:
    """Create a template engine for a template directory."""
    return TemplateEngine(template_dir)
