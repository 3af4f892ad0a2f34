"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Environment isolation for SCHEMAFORM_* variables
- Diagnostic sink fixtures
- Sample schema payload fixtures
"""

from __future__ import annotations

import os
from typing import Any

import pytest
from dotenv import load_dotenv

from schemaform.config import EnvVar
from schemaform.diagnostics import RecordingDiagnosticSink

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove SCHEMAFORM_* variables so tests see the documented defaults."""
    for var in EnvVar:
        if var.value.name in os.environ:
            monkeypatch.delenv(var.value.name)


@pytest.fixture
def recording_sink() -> RecordingDiagnosticSink:
    """Diagnostic sink that keeps every emitted diagnostic."""
    return RecordingDiagnosticSink()


# =============================================================================
# Schema Fixtures
# =============================================================================


@pytest.fixture
def age_payload() -> dict[str, Any]:
    """Unversioned single-field payload with numeric bounds.

    Structure:
        uiSchema "T"
        └── age (number, required, 18..99)
    """
    return {
        "uiSchema": {
            "title": "T",
            "fields": [
                {
                    "id": "age",
                    "label": "Age",
                    "type": "number",
                    "required": True,
                    "min": 18,
                    "max": 99,
                }
            ],
        }
    }


@pytest.fixture
def conditional_payload() -> dict[str, Any]:
    """Version 1 payload where two required fields depend on field 'a'.

    Structure:
        uiSchema "T"
        ├── a (text)
        ├── b (text, required, shown when a == "yes", otherwise hidden)
        └── c (text, required, shown when a == "yes", otherwise disabled)
    """
    condition = {"op": "equals", "ref": "a", "value": "yes"}
    return {
        "version": "1",
        "uiSchema": {
            "title": "T",
            "fields": [
                {"id": "a", "label": "A", "type": "text"},
                {
                    "id": "b",
                    "label": "B",
                    "type": "text",
                    "required": True,
                    "condition": condition,
                    "fallback": "hidden",
                },
                {
                    "id": "c",
                    "label": "C",
                    "type": "text",
                    "required": True,
                    "condition": condition,
                    "fallback": "disabled",
                },
            ],
        },
    }
