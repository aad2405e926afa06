from dataclasses import dataclass


@dataclass
class PerformanceMetrics:
    """Track performance metrics for cached chat requests."""

    total_queries: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    total_lookup_time_ms: float = 0.0
    total_llm_time_ms: float = 0.0
    llm_calls: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_queries == 0:
            return 0.0
        return self.cache_hits / self.total_queries

    @property
    def avg_lookup_time_ms(self) -> float:
        """Calculate average lookup time."""
        if self.total_queries == 0:
            return 0.0
        return self.total_lookup_time_ms / self.total_queries

    @property
    def avg_llm_time_ms(self) -> float:
        """Calculate average LLM call time."""
        if self.llm_calls == 0:
            return 0.0
        return self.total_llm_time_ms / self.llm_calls

    def record_hit(self, lookup_time_ms: float) -> None:
        """Record a cache hit."""
        self.total_queries += 1
        self.cache_hits += 1
        self.total_lookup_time_ms += lookup_time_ms

    def record_miss(self, lookup_time_ms: float) -> None:
        """Record a cache miss."""
        self.total_queries += 1
        self.cache_misses += 1
        self.total_lookup_time_ms += lookup_time_ms

    def record_llm_call(self, duration_ms: float) -> None:
        """Record an LLM API call."""
        self.llm_calls += 1
        self.total_llm_time_ms += duration_ms

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "total_queries": self.total_queries,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": self.hit_rate,
            "avg_lookup_time_ms": self.avg_lookup_time_ms,
            "avg_llm_time_ms": self.avg_llm_time_ms,
            "total_llm_time_ms": self.total_llm_time_ms,
            "llm_calls": self.llm_calls,
        }
