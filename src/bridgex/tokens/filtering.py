"""Candidate tokens for the asset pickers.

Tokens are yielded bucket by bucket: a token requested through a deep link,
tokens the user holds, popular tokens, then the rest of the token list.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterator, Mapping, Optional, Protocol, Sequence

from bridgex.chains import NATIVE_ADDRESS
from bridgex.quotes.types import Token

ShouldAddToken = Callable[[str, Optional[str], Optional[int]], bool]


class TokenBucketPriority(str, Enum):
    OWNED = "owned"
    TOP = "top"


@dataclass(frozen=True)
class TokenCandidate:
    """A token offered in an asset picker."""

    token: Token
    balance: Optional[Decimal] = None


class TokenListProvider(Protocol):
    """Source of bridgeable tokens for a chain."""

    def get_token_list(self, chain_id: int) -> Mapping[str, Token]:
        ...

    def get_top_assets(self, chain_id: int) -> Sequence[str]:
        ...


def _lookup(token_list: Mapping[str, Token], address: str) -> Optional[Token]:
    token = token_list.get(address)
    if token is not None:
        return token
    lowered = address.lower()
    return next((t for key, t in token_list.items() if key.lower() == lowered), None)


def _normalized(token: Token) -> Token:
    if token.is_native and token.address != NATIVE_ADDRESS:
        return replace(token, address=NATIVE_ADDRESS)
    return token


def tokens_with_filtering(
    token_list: Mapping[str, Token],
    top_tokens: Sequence[str],
    chain_id: Optional[int],
    owned_tokens: Sequence[TokenCandidate] = (),
    should_add_token: Optional[ShouldAddToken] = None,
    token_address_from_url: Optional[str] = None,
    priority: TokenBucketPriority = TokenBucketPriority.OWNED,
) -> Iterator[TokenCandidate]:
    """Yield picker candidates in bucket order, each token once.

    Args:
        token_list: Bridgeable tokens of the chain keyed by address
        top_tokens: Addresses of popular tokens on the chain
        chain_id: Chain the picker shows tokens for
        owned_tokens: Tokens the user holds, with balances
        should_add_token: Filter on (symbol, address, chain id), e.g. a search query
        token_address_from_url: Token requested through a deep link
        priority: Whether owned or top tokens come first

    Yields:
        TokenCandidate entries
    """
    if chain_id is None:
        return
    accept = should_add_token or (lambda symbol, address, token_chain_id: True)
    seen: set[tuple[int, str]] = set()

    def emit(candidate: TokenCandidate) -> Optional[TokenCandidate]:
        token = _normalized(candidate.token)
        if token.key in seen:
            return None
        if not accept(token.symbol, token.address, token.chain_id):
            return None
        seen.add(token.key)
        return replace(candidate, token=token)

    def from_list(address: str) -> Optional[TokenCandidate]:
        token = _lookup(token_list, address)
        if token is None or token.chain_id != chain_id:
            return None
        return emit(TokenCandidate(token=token))

    def owned() -> Iterator[TokenCandidate]:
        ranked = sorted(
            owned_tokens,
            key=lambda c: c.balance if c.balance is not None else Decimal(0),
            reverse=True,
        )
        for candidate in ranked:
            emitted = emit(candidate)
            if emitted:
                yield emitted

    def top() -> Iterator[TokenCandidate]:
        for address in top_tokens:
            emitted = from_list(address)
            if emitted:
                yield emitted

    if token_address_from_url:
        emitted = from_list(token_address_from_url)
        if emitted:
            yield emitted

    buckets = (owned, top) if priority == TokenBucketPriority.OWNED else (top, owned)
    for bucket in buckets:
        yield from bucket()

    for address in list(token_list):
        emitted = from_list(address)
        if emitted:
            yield emitted


def tokens_for_chain(
    provider: TokenListProvider,
    chain_id: Optional[int],
    owned_tokens: Sequence[TokenCandidate] = (),
    should_add_token: Optional[ShouldAddToken] = None,
    token_address_from_url: Optional[str] = None,
    priority: TokenBucketPriority = TokenBucketPriority.OWNED,
) -> Iterator[TokenCandidate]:
    """Yield picker candidates for a chain from a token list provider."""
    if chain_id is None:
        return iter(())
    return tokens_with_filtering(
        provider.get_token_list(chain_id),
        provider.get_top_assets(chain_id),
        chain_id,
        owned_tokens=owned_tokens,
        should_add_token=should_add_token,
        token_address_from_url=token_address_from_url,
        priority=priority,
    )
