"""Account references and the deduplicating account table"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

from .errors import ConstructionError
from .publickey import PublicKey


@dataclass(frozen=True)
class AccountMeta:
    """Account referenced by an instruction, with its access flags.

    ``order_hint`` is only consulted when the table is ordered with
    ``Ordering.EXPLICIT``.
    """
    public_key: PublicKey
    is_signer: bool
    is_writable: bool
    order_hint: Optional[int] = None

    def __post_init__(self):
        if self.public_key is None:
            raise ConstructionError("Account public key is required")
        object.__setattr__(self, 'public_key', PublicKey(self.public_key))


class Ordering(Enum):
    """How an account table orders its entries"""
    DEFAULT = 'default'
    EXPLICIT = 'explicit'


class AccountKeysList:
    """Accumulates account references, one entry per address.

    Entries are keyed by raw address bytes. Adding an address that is already
    present merges the flags (signer and writable are OR-ed) instead of adding
    a second entry. Insertion order is kept and breaks ties when sorting.
    """

    def __init__(self, metas: Optional[Iterable[AccountMeta]] = None):
        self._accounts: Dict[bytes, AccountMeta] = {}
        if metas is not None:
            self.add_all(metas)

    def add(self, meta: AccountMeta) -> None:
        key = bytes(meta.public_key)
        existing = self._accounts.get(key)
        if existing is None:
            self._accounts[key] = meta
            return

        self._accounts[key] = AccountMeta(
            public_key=existing.public_key,
            is_signer=existing.is_signer or meta.is_signer,
            is_writable=existing.is_writable or meta.is_writable,
            order_hint=existing.order_hint if existing.order_hint is not None else meta.order_hint,
        )

    def add_all(self, metas: Iterable[AccountMeta]) -> None:
        for meta in metas:
            self.add(meta)

    def get(self, public_key: PublicKey) -> Optional[AccountMeta]:
        return self._accounts.get(bytes(public_key))

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, public_key) -> bool:
        return bytes(public_key) in self._accounts

    def __iter__(self) -> Iterator[AccountMeta]:
        return iter(self._accounts.values())

    def get_list(
        self,
        fee_payer: Optional[PublicKey] = None,
        ordering: Ordering = Ordering.DEFAULT,
    ) -> List[AccountMeta]:
        """Return the entries in wire order.

        Default ordering groups signer+writable, signer+readonly,
        writable, readonly, then moves the fee payer to index 0 as a
        writable signer (adding it if no instruction referenced it).

        Explicit ordering sorts every entry by ``order_hint`` and requires
        the fee payer, when given, to hold the smallest hint.
        """
        if ordering is Ordering.EXPLICIT:
            return self._explicit_list(fee_payer)

        keys_list = sorted(
            self._accounts.values(),
            key=lambda meta: (not meta.is_signer, not meta.is_writable),
        )
        if fee_payer is None:
            return keys_list

        fee_payer = PublicKey(fee_payer)
        payer_meta = AccountMeta(fee_payer, is_signer=True, is_writable=True)
        return [payer_meta] + [meta for meta in keys_list if meta.public_key != fee_payer]

    def _explicit_list(self, fee_payer: Optional[PublicKey]) -> List[AccountMeta]:
        missing = [meta.public_key.to_base58() for meta in self if meta.order_hint is None]
        if missing:
            raise ConstructionError(
                "Explicit ordering requires an order hint on every account",
                {"missing": missing},
            )

        keys_list = sorted(self._accounts.values(), key=lambda meta: meta.order_hint)
        if fee_payer is None:
            return keys_list

        payer_meta = self.get(fee_payer)
        if payer_meta is None:
            raise ConstructionError(f"Fee payer {fee_payer} is not referenced by any instruction")
        if any(meta.order_hint <= payer_meta.order_hint for meta in keys_list if meta is not payer_meta):
            raise ConstructionError(
                "Fee payer must carry the smallest order hint",
                {"fee_payer": str(fee_payer), "order_hint": payer_meta.order_hint},
            )
        keys_list[0] = replace(payer_meta, is_signer=True, is_writable=True)
        return keys_list
