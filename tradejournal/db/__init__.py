"""Trading journal database layer.

Provides DuckDB-based storage for trades, zones, planned entries and
settings in a single embedded file. Records are decoded through the
dataclasses in ``records`` before every write.
"""
