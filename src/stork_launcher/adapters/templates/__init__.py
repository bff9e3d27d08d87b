"""Jinja2 template renderer."""

from .jinja import JinjaTemplateRenderer

__all__ = ["JinjaTemplateRenderer"]
