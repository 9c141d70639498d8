"""Wire encoders for points."""

from influxdb_reporter.core.encoding.line_protocol import encode_point, encode_points

__all__ = ["encode_point", "encode_points"]
