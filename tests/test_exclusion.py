"""Tests for the exclusion filter."""

from smbwatch.crawler.exclusion import ExclusionFilter, normalize_extension


class TestExclusionFilter:
    """Tests for ExclusionFilter."""

    def test_empty_filter_skips_nothing(self):
        exclusion = ExclusionFilter()
        assert not exclusion.should_skip_share("admin")
        assert not exclusion.should_skip_file("exe")
        assert not exclusion.should_skip_file("")

    def test_share_names_are_case_sensitive(self):
        exclusion = ExclusionFilter.from_lists(shares=["ADMIN$"])
        assert exclusion.should_skip_share("ADMIN$")
        assert not exclusion.should_skip_share("admin$")

    def test_extensions_are_case_insensitive(self):
        exclusion = ExclusionFilter.from_lists(extensions=["exe", "dll"])
        assert exclusion.should_skip_file("EXE")
        assert exclusion.should_skip_file("dll")
        assert not exclusion.should_skip_file("txt")

    def test_configured_extensions_are_normalized(self):
        exclusion = ExclusionFilter.from_lists(extensions=[".EXE", " Dll "])
        assert exclusion.extensions == frozenset({"exe", "dll"})

    def test_empty_extension_only_when_configured(self):
        assert not ExclusionFilter.from_lists(extensions=["exe"]).should_skip_file("")
        assert ExclusionFilter.from_lists(extensions=[""]).should_skip_file("")


class TestNormalizeExtension:
    """Tests for normalize_extension."""

    def test_strips_single_leading_dot(self):
        assert normalize_extension(".gz") == "gz"

    def test_lowercases(self):
        assert normalize_extension("TXT") == "txt"

    def test_plain_extension_unchanged(self):
        assert normalize_extension("pdf") == "pdf"
