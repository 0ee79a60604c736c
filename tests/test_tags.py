"""Tests for tag templating and field name conversion."""

import pytest

from kubemetrics.tags import TagTemplate, underscore


class TestUnderscore:
    """Mixed-case metric names become snake_case."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("workingSetBytes", "working_set_bytes"),
            ("rxBytes", "rx_bytes"),
            ("majorPageFaults", "major_page_faults"),
            ("inodes", "inodes"),
            ("maxpid", "maxpid"),
        ],
    )
    def test_conversion(self, name, expected):
        assert underscore(name) == expected

    def test_leading_capital_gets_underscore(self):
        """Every uppercase letter is prefixed, including the first one."""
        assert underscore("Bytes") == "_bytes"


class TestTagTemplate:
    """Wildcard and literal templates."""

    def test_wildcard_in_the_middle(self):
        template = TagTemplate("kubernetes.*.metrics")
        assert template.generate("node.uptime") == "kubernetes.node.uptime.metrics"

    def test_default_style_trailing_wildcard(self):
        template = TagTemplate("kubernetes.metrics.*")
        assert template.prefix == "kubernetes.metrics."
        assert template.suffix == ""
        assert template.generate("pod.cpu.usage") == "kubernetes.metrics.pod.cpu.usage"

    def test_generate_is_prefix_name_suffix(self):
        template = TagTemplate("a*b")
        for name in ("", "x", "node.fs.inodes"):
            assert template.generate(name) == "a" + name + "b"

    def test_without_wildcard_is_constant(self):
        template = TagTemplate("kubernetes.metrics")
        assert template.generate("node.uptime") == "kubernetes.metrics"
        assert template.generate("container.logs.used_bytes") == "kubernetes.metrics"

    def test_only_first_wildcard_splits(self):
        template = TagTemplate("a.*.b.*")
        assert template.generate("x") == "a.x.b.*"
