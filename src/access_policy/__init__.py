"""
Package marker for source code under `src.access_policy`.
It groups the tier hierarchy, permission gate, delete guard, geo-trust evaluator, and response projection.
Every module here is a pure function of already-loaded inputs; nothing in this package performs I/O
except the policy loader, which reads the YAML policy files once at startup.
"""
