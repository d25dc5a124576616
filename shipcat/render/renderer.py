"""Template rendering capability and its jinja2 implementation."""
from pathlib import Path
from typing import Any, Dict, List, Protocol, Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from ..errors import TemplateFailure

Context = Dict[str, Any]


class Renderer(Protocol):
    """Renders a named template with a context."""

    def render(self, template_name: str, context: Context) -> str:
        """Render a template.

        Raises:
            TemplateFailure: If the template is missing or fails to render.
        """
        ...


class JinjaRenderer:
    """Renders templates found in a list of folders with jinja2."""

    def __init__(self, search_paths: List[Union[str, Path]]):
        """Initialize the renderer.

        Args:
            search_paths: Folders searched in order for template names.
        """
        self.search_paths = [str(p) for p in search_paths]
        self.jinja_env = Environment(
            loader=FileSystemLoader(self.search_paths),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    @classmethod
    def for_service(
        cls,
        service: str,
        services_dir: Union[str, Path] = "services",
        templates_dir: Union[str, Path] = "templates",
    ) -> "JinjaRenderer":
        """Renderer seeing the service's own folder first, then shared templates."""
        return cls([Path(services_dir) / service, Path(templates_dir)])

    def render(self, template_name: str, context: Context) -> str:
        try:
            template = self.jinja_env.get_template(template_name)
            return template.render(**context)
        except TemplateError as e:
            raise TemplateFailure(f"Failed to render {template_name}: {e}") from e
