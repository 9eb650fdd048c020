"""Declarative recommendation rules.

Rules are plain data: a condition over the :class:`FeatureVector` and the
template family, the description and priority reported to the user, and the
name of the :data:`~stackstart.enhancer.actions.ACTIONS` entry that implements
the enhancement.  Supporting a new template family means adding a row to
:data:`TEMPLATE_RULES`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from ..config import TemplateFamily
from .models import EnhancementCategory, FeatureVector, Priority

Condition = Callable[[FeatureVector, TemplateFamily], bool]


def always(features: FeatureVector, template: TemplateFamily) -> bool:
    return True


def missing(feature: str) -> Condition:
    """Condition that holds when *feature* is absent from the project."""

    def condition(features: FeatureVector, template: TemplateFamily) -> bool:
        return not getattr(features, feature)

    condition.__name__ = f"missing_{feature}"
    return condition


def node_like_missing(feature: str) -> Condition:
    """Like :func:`missing`, restricted to families with a Node backend."""
    base = missing(feature)

    def condition(features: FeatureVector, template: TemplateFamily) -> bool:
        return template.is_node_like and base(features, template)

    condition.__name__ = f"node_like_missing_{feature}"
    return condition


@dataclass(frozen=True)
class Rule:
    condition: Condition
    category: EnhancementCategory
    description: str
    priority: Priority
    action: str


_C = EnhancementCategory
_P = Priority

GENERIC_RULES: tuple[Rule, ...] = (
    Rule(missing("has_logging"), _C.DEPENDENCY,
         "Add structured logging with Winston", _P.HIGH, "logging"),
    Rule(missing("has_error_handling"), _C.CODE,
         "Add comprehensive error handling", _P.HIGH, "error_handling"),
    Rule(missing("has_environment_config"), _C.CONFIG,
         "Add environment configuration with dotenv", _P.MEDIUM, "environment"),
    Rule(node_like_missing("has_validation"), _C.DEPENDENCY,
         "Add input validation with Joi", _P.MEDIUM, "validation"),
    Rule(node_like_missing("has_api_documentation"), _C.FILE,
         "Add API documentation with Swagger/OpenAPI", _P.MEDIUM, "api_docs"),
    Rule(always, _C.CONFIG,
         "Enhance testing configuration with coverage reporting", _P.MEDIUM, "testing"),
)

REACT_RULES: tuple[Rule, ...] = (
    Rule(always, _C.FILE,
         "Add React performance optimization utilities", _P.MEDIUM, "react_performance"),
    Rule(always, _C.DEPENDENCY,
         "Add React Router for navigation", _P.MEDIUM, "react_router"),
    Rule(always, _C.FILE,
         "Add custom React hooks for common patterns", _P.LOW, "react_hooks"),
)

NODE_RULES: tuple[Rule, ...] = (
    Rule(always, _C.FILE,
         "Add database connection utilities", _P.MEDIUM, "database"),
    Rule(always, _C.DEPENDENCY,
         "Add security middleware (helmet, cors)", _P.HIGH, "security"),
    Rule(always, _C.FILE,
         "Add rate limiting and caching", _P.MEDIUM, "caching"),
)

PYTHON_RULES: tuple[Rule, ...] = (
    Rule(always, _C.FILE,
         "Add Python logging configuration", _P.HIGH, "python_logging"),
    Rule(always, _C.FILE,
         "Add Flask/FastAPI utilities", _P.MEDIUM, "python_web"),
    Rule(always, _C.CONFIG,
         "Add Python type hints and mypy configuration", _P.MEDIUM, "python_typing"),
)

FULL_STACK_RULES: tuple[Rule, ...] = REACT_RULES + NODE_RULES + (
    Rule(always, _C.FILE,
         "Add API client utilities for frontend-backend communication", _P.HIGH, "api_client"),
)

TEMPLATE_RULES: dict[TemplateFamily, tuple[Rule, ...]] = {
    TemplateFamily.REACT: REACT_RULES,
    TemplateFamily.NODE: NODE_RULES,
    TemplateFamily.PYTHON: PYTHON_RULES,
    TemplateFamily.FULL_STACK: FULL_STACK_RULES,
}


def rules_for(template: TemplateFamily) -> tuple[Rule, ...]:
    """Generic rules followed by the template's own rules, without de-duplication."""
    return GENERIC_RULES + TEMPLATE_RULES.get(template, ())
