"""
Package marker for shared helpers under `src.common`.
It groups settings and logging configuration used by both the API and the policy engine.
"""
