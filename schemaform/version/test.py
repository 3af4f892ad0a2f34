"""Unit tests for the schema version gate."""

import pytest

from .lib import (
    ParsedSchemaVersion,
    VersionStatus,
    describe_version_problem,
    get_schema_version_info,
    legacy_advisory,
    parse_schema_version,
)


class TestParseSchemaVersion:
    """Tests for parse_schema_version."""

    @pytest.mark.unit
    def test_major_only(self):
        assert parse_schema_version("1") == ParsedSchemaVersion(major=1)

    @pytest.mark.unit
    def test_full_version(self):
        assert parse_schema_version(" 2.10.3 ") == ParsedSchemaVersion(2, 10, 3)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw", ["", "abc", "v1", "1.", "1.2.3.4", "-1", "1.x", "\u0661", "1.\u0662"]
    )
    def test_rejects_malformed(self, raw):
        """Anything outside MAJOR[.MINOR[.PATCH]] is rejected."""
        assert parse_schema_version(raw) is None


class TestVersionGate:
    """Tests for get_schema_version_info."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw,status",
        [
            ("1", VersionStatus.SUPPORTED),
            ("1.4.2", VersionStatus.SUPPORTED),
            ("0", VersionStatus.LEGACY),
            ("0.9", VersionStatus.LEGACY),
            (None, VersionStatus.LEGACY),
            ("7", VersionStatus.UNSUPPORTED),
            ("abc", VersionStatus.INVALID),
            ("\u0661", VersionStatus.INVALID),
        ],
    )
    def test_classification(self, raw, status):
        assert get_schema_version_info(raw).status == status

    @pytest.mark.unit
    def test_blocking_statuses(self):
        """Only invalid and unsupported stop rendering."""
        assert get_schema_version_info("abc").blocks_rendering
        assert get_schema_version_info("7").blocks_rendering
        assert not get_schema_version_info("0").blocks_rendering
        assert not get_schema_version_info("1").blocks_rendering

    @pytest.mark.unit
    def test_raw_is_trimmed(self):
        info = get_schema_version_info("  1.0 ")
        assert info.raw == "1.0"
        assert info.major == 1

    @pytest.mark.unit
    def test_invalid_has_no_major(self):
        assert get_schema_version_info("abc").major is None


class TestAdvisories:
    """Tests for advisory and problem descriptions."""

    @pytest.mark.unit
    def test_legacy_advisory_outside_production(self):
        advisory = legacy_advisory(get_schema_version_info(None), production=False)
        assert advisory is not None
        assert '"1"' in advisory

    @pytest.mark.unit
    def test_legacy_advisory_suppressed_in_production(self):
        assert legacy_advisory(get_schema_version_info("0"), production=True) is None

    @pytest.mark.unit
    def test_no_advisory_for_supported(self):
        assert legacy_advisory(get_schema_version_info("1"), production=False) is None

    @pytest.mark.unit
    def test_problem_descriptions(self):
        assert "not supported" in describe_version_problem(get_schema_version_info("7"))
        assert "not a valid" in describe_version_problem(get_schema_version_info("abc"))
        assert describe_version_problem(get_schema_version_info("1")) is None
