"""Readers for the upstream tables the summaries are built from.

The daily spending table and the individual contract entries are produced by
the ingestion step upstream; this package only reads and checks them.
"""
