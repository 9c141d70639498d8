"""Tests for the line protocol encoder."""

import re

import pytest
from hypothesis import given
from hypothesis import strategies as st

from influxdb_reporter.core.encoding.line_protocol import (
    encode_point,
    encode_points,
    escape_key,
    escape_measurement,
)
from influxdb_reporter.core.models import Point

_ESCAPED = re.compile(r"\\[\\,= ]")


class TestLineProtocolEncoder:
    """Tests for encoding points as line protocol."""

    @pytest.mark.encoding
    def test_encode_single_point(self) -> None:
        """A point encodes to measurement, fields and a ms timestamp."""
        point = Point(measurement="cpu", timestamp=1702300000000, fields={"value": 0.5})

        assert encode_point(point) == "cpu value=0.5 1702300000000"

    @pytest.mark.encoding
    def test_integers_are_written_as_floats(self) -> None:
        """Integer fields keep a float type so the series never changes type."""
        point = Point(measurement="requests", timestamp=1, fields={"count": 100})

        assert encode_point(point) == "requests count=100.0 1"

    @pytest.mark.encoding
    def test_tags_are_sorted_by_key(self) -> None:
        """Tags follow the measurement in key order."""
        point = Point(
            measurement="cpu",
            timestamp=1,
            fields={"value": 1.0},
            tags={"region": "eu", "host": "web-1"},
        )

        assert encode_point(point) == "cpu,host=web-1,region=eu value=1.0 1"

    @pytest.mark.encoding
    def test_fields_keep_insertion_order(self) -> None:
        """Multiple fields are comma separated in their original order."""
        point = Point(
            measurement="logins",
            timestamp=1,
            fields={"count": 3, "m1_rate": 0.25},
        )

        assert encode_point(point) == "logins count=3.0,m1_rate=0.25 1"

    @pytest.mark.encoding
    def test_special_characters_are_escaped(self) -> None:
        """Commas, spaces and equals signs are backslash escaped."""
        point = Point(
            measurement="disk free,root",
            timestamp=1,
            fields={"free bytes": 1.0},
            tags={"mount point": "/var,log", "a=b": "c"},
        )

        assert encode_point(point) == (
            r"disk\ free\,root,a\=b=c,mount\ point=/var\,log free\ bytes=1.0 1"
        )

    @pytest.mark.encoding
    def test_measurement_keeps_equals_sign(self) -> None:
        """Equals signs need no escaping in measurement names."""
        assert escape_measurement("a=b") == "a=b"

    @pytest.mark.encoding
    def test_empty_tag_values_are_dropped(self) -> None:
        """Tags with empty values are left out."""
        point = Point(
            measurement="cpu", timestamp=1, fields={"value": 1.0}, tags={"host": ""}
        )

        assert encode_point(point) == "cpu value=1.0 1"

    @pytest.mark.encoding
    def test_encode_multiple_points(self) -> None:
        """Multiple points are newline-delimited and newline-terminated."""
        points = [
            Point(measurement="a", timestamp=1, fields={"value": 1.0}),
            Point(measurement="b", timestamp=2, fields={"value": 2.0}),
        ]

        result = encode_points(points)

        assert result == "a value=1.0 1\nb value=2.0 2\n"

    @pytest.mark.encoding
    def test_encode_empty_iterable(self) -> None:
        """Empty input returns empty string."""
        assert encode_points([]) == ""

    @pytest.mark.encoding
    def test_trailing_backslash_does_not_escape_separator(self) -> None:
        """A tag value ending in a backslash keeps the next tag separate."""
        point = Point(
            measurement="cpu",
            timestamp=1,
            fields={"value": 1.0},
            tags={"a": "x\\", "b": "y"},
        )

        assert encode_point(point) == r"cpu,a=x\\,b=y value=1.0 1"

    @pytest.mark.encoding
    def test_backslashes_are_doubled_in_measurement(self) -> None:
        """Backslashes in measurement names are escaped too."""
        assert escape_measurement("c:\\temp") == r"c:\\temp"

    @pytest.mark.encoding
    @pytest.mark.parametrize(
        "point_kwargs",
        [
            {"measurement": "cpu\nmem"},
            {"tags": {"host": "web\r1"}},
            {"tags": {"ho\nst": "web-1"}},
            {"fields": {"va\nlue": 1.0}},
        ],
    )
    def test_line_breaks_cannot_reach_the_encoder(self, point_kwargs: dict) -> None:
        """Points refuse names that would split a line."""
        kwargs = {"measurement": "cpu", "timestamp": 1, "fields": {"value": 1.0}}
        kwargs.update(point_kwargs)

        with pytest.raises(ValueError, match="line break"):
            Point(**kwargs)

    @pytest.mark.encoding
    @given(st.text(min_size=1))
    def test_escaped_keys_have_no_bare_separators(self, key: str) -> None:
        """After escaping, no backslash, comma, equals sign or space stands on its own."""
        unescaped_rest = _ESCAPED.sub("", escape_key(key))

        assert "\\" not in unescaped_rest
        assert "," not in unescaped_rest
        assert "=" not in unescaped_rest
        assert " " not in unescaped_rest

    @pytest.mark.encoding
    @given(
        measurement=st.text(min_size=1),
        tag_value=st.text(),
        field_key=st.text(min_size=1),
    )
    def test_encoded_point_is_one_line(
        self, measurement: str, tag_value: str, field_key: str
    ) -> None:
        """Any point that can be built encodes to exactly one line."""
        try:
            point = Point(
                measurement=measurement,
                timestamp=1,
                fields={field_key: 1.0},
                tags={"t": tag_value},
            )
        except ValueError:
            assert any("\n" in s or "\r" in s for s in (measurement, tag_value, field_key))
            return

        line = encode_point(point)

        assert "\n" not in line
        assert "\r" not in line
