"""Catalog ingestion core: schema decoding, normalization and fetching."""
