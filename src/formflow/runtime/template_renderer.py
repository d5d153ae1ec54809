"""
Jinja2 template renderer for server-rendered formflow pages.

Sets up the Jinja2 environment with custom filters and template loading
from the package's templates/ directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, select_autoescape

from formflow.core.ids import slugify
from formflow.derived.loan import format_currency

# Template directory
TEMPLATES_DIR = Path(__file__).parent.parent / "templates"


def _currency_filter(value: Any) -> str:
    """Format a number as whole US dollars, e.g. ``$600,000``."""
    if value is None or value == "":
        return ""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return str(value)
    return format_currency(amount)


def _thousands_filter(value: Any) -> str:
    """Group digits with commas, leaving non-numbers as-is."""
    if value is None or value == "":
        return ""
    try:
        return f"{int(float(value)):,}"
    except (TypeError, ValueError):
        return str(value)


def _slugify_filter(value: Any) -> str:
    """Slugify a string for use as an HTML id attribute."""
    if value is None:
        return ""
    return slugify(str(value))


def create_jinja_env(project_templates_dir: Path | None = None) -> Environment:
    """Create and configure the Jinja2 environment.

    Args:
        project_templates_dir: Optional path to templates that take
            priority over the packaged ones.
    """
    framework_loader = FileSystemLoader(str(TEMPLATES_DIR))
    if project_templates_dir and project_templates_dir.is_dir():
        loader = ChoiceLoader([FileSystemLoader(str(project_templates_dir)), framework_loader])
    else:
        loader = ChoiceLoader([framework_loader])

    env = Environment(
        loader=loader,
        autoescape=select_autoescape(["html"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )

    from formflow import __version__

    env.globals["_formflow_version"] = __version__

    # Custom filters
    env.filters["currency"] = _currency_filter
    env.filters["thousands"] = _thousands_filter
    env.filters["slugify"] = _slugify_filter

    return env


# Module-level singleton
_env: Environment | None = None


def get_jinja_env() -> Environment:
    """Get the shared Jinja2 environment (lazy singleton)."""
    global _env
    if _env is None:
        _env = create_jinja_env()
    return _env


def configure_project_templates(project_templates_dir: Path) -> None:
    """Reconfigure the environment with project-level template overrides."""
    global _env
    _env = create_jinja_env(project_templates_dir)


def render_page(template_name: str, **kwargs: Any) -> str:
    """
    Render a full page template.

    Args:
        template_name: Template path relative to templates/
            (e.g. "pages/applicant_details.html").
        **kwargs: Template variables.

    Returns:
        Rendered HTML string.
    """
    env = get_jinja_env()
    template = env.get_template(template_name)
    return template.render(**kwargs)


def render_fragment(template_name: str, **kwargs: Any) -> str:
    """
    Render an HTML fragment (controls, composed fields, HTMX partial responses).

    Args:
        template_name: Template path relative to templates/.
        **kwargs: Template variables.

    Returns:
        Rendered HTML fragment string.
    """
    env = get_jinja_env()
    template = env.get_template(template_name)
    return template.render(**kwargs)
