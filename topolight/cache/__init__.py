"""Owned caches of precomputed topographic results."""

from topolight.cache.yearly_cache import YearlyTopoCache

__all__ = ["YearlyTopoCache"]
