"""
Package marker for source code under `src`.
It groups the access policy engine, the API layer, and shared settings under one import path.
Most functionality lives in the sibling packages; this file intentionally stays lightweight.
"""
