"""Client for threads, runs, vector stores, moderation and speech, with a stream reader and rate-limit headers."""

__version__ = "0.1.0"

__all__ = [
    "moderation",
    "ratelimit",
    "reasoning",
    "runs",
    "speech",
    "streaming",
    "threads",
    "transport",
    "vector_stores",
]