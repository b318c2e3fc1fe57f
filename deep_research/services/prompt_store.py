"""Packaged prompt catalog.

Prompts live in ``deep_research/prompts/prompts.json`` as a nested object keyed
by component; each leaf is a string or a list of lines joined with newlines.
"""
from __future__ import annotations

import json
from functools import cache
from importlib import resources
from string import Template
from typing import Any


@cache
def load_catalog() -> dict[str, Any]:
    source = resources.files("deep_research") / "prompts" / "prompts.json"
    catalog = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(catalog, dict):
        raise ValueError("prompts.json must hold a JSON object")
    return catalog


@cache
def get_template(key: str) -> Template:
    """Look up a dotted key such as ``reporter.prompt``."""
    node: Any = load_catalog()
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            raise KeyError(f"Unknown prompt: {key}")
        node = node[part]

    if isinstance(node, list) and all(isinstance(line, str) for line in node):
        return Template("\n".join(node))
    if isinstance(node, str):
        return Template(node)
    raise TypeError(f"Prompt {key} must be a string or a list of lines")


def render_prompt(key: str, **values: Any) -> str:
    template = get_template(key)
    missing = sorted(set(template.get_identifiers()) - values.keys())
    if missing:
        raise KeyError(f"Prompt {key} is missing values for: {', '.join(missing)}")
    return template.substitute(values)
