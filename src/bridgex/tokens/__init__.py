"""Asset picker token enumeration."""

from bridgex.tokens.filtering import (
    TokenBucketPriority,
    TokenCandidate,
    TokenListProvider,
    tokens_for_chain,
    tokens_with_filtering,
)

__all__ = [
    "TokenBucketPriority",
    "TokenCandidate",
    "TokenListProvider",
    "tokens_for_chain",
    "tokens_with_filtering",
]
