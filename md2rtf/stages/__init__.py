"""Pipeline stages: deduplication, markdown normalization, RTF optimization.

Each stage exposes a small, pure function API and is gated by the
`processing.optimize` flag in the runtime configuration.
"""
