"""Encoders for health records."""

from healthrecords.core.encoding.ndjson import decode_records, encode_records

__all__ = ["decode_records", "encode_records"]
