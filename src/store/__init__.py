"""Station code interning and columnar storage.

This package owns the identifier map, record batch construction,
and the Parquet output file.
"""
