"""Core domain: records, metadata and aggregate metric identifiers."""
