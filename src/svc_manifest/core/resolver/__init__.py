"""svc-manifest — Resolver (core)."""

from .resolver import LAYER_NAMES, ConfigResolver, ResolvedComponent  # noqa: F401
