"""Ingest helpers: locate and split the data section of bill exports."""
