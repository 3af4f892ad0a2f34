"""Unit tests for visibility resolution."""

import pytest

from schemaform.condition import EvaluationContext
from schemaform.diagnostics import RecordingDiagnosticSink

from .lib import Visibility, resolve_visibility

EQUALS_YES = {"op": "equals", "ref": "a", "value": "yes"}


class TestResolveVisibility:
    """Tests for resolve_visibility."""

    @pytest.mark.unit
    def test_no_condition_is_visible(self):
        visibility = resolve_visibility(None, None, EvaluationContext())
        assert visibility == Visibility(should_render=True, disabled=False)
        assert visibility.is_active

    @pytest.mark.unit
    def test_condition_met(self):
        ctx = EvaluationContext(values={"a": "yes"})
        assert resolve_visibility(EQUALS_YES, "disabled", ctx).is_active

    @pytest.mark.unit
    def test_fallback_defaults_to_hidden(self):
        ctx = EvaluationContext(values={"a": "no"})
        visibility = resolve_visibility(EQUALS_YES, None, ctx)
        assert visibility.should_render is False
        assert not visibility.is_active

    @pytest.mark.unit
    def test_fallback_disabled(self):
        ctx = EvaluationContext(values={"a": "no"})
        visibility = resolve_visibility(EQUALS_YES, "disabled", ctx)
        assert visibility.should_render is True
        assert visibility.disabled is True
        assert not visibility.is_active

    @pytest.mark.unit
    def test_malformed_condition_renders(self):
        sink = RecordingDiagnosticSink()
        visibility = resolve_visibility({"op": "nope"}, "hidden", EvaluationContext(), sink)
        assert visibility.is_active
        assert sink.codes == ["unknown-op"]
