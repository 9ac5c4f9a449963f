import hashlib
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from .shuffle_bag import normalize_hash


@dataclass(frozen=True)
class BlockData:
    """
    Block as supplied by the rendering host.
    Only the hash and the number/order of transactions matter to the scene;
    transaction records are carried through untouched.
    """
    hash: str
    transactions: Tuple[Any, ...] = field(default_factory=tuple)
    number: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "transactions", tuple(self.transactions or ()))

    @property
    def seed_prefix(self) -> str:
        return normalize_hash(self.hash)[:16]

    @staticmethod
    def from_dict(data: Mapping) -> "BlockData":
        if not isinstance(data, Mapping):
            raise ValueError("block must be a JSON object")
        if "hash" not in data:
            raise ValueError("block needs a 'hash' field")
        txs = data.get("transactions") or []
        if not isinstance(txs, (list, tuple)):
            raise ValueError("'transactions' must be a list")
        number = data.get("number")
        if number is not None:
            try:
                number = int(number)
            except (TypeError, ValueError):
                raise ValueError("'number' must be an integer") from None
        return BlockData(hash=data["hash"], transactions=tuple(txs), number=number)

    def to_dict(self):
        return {
            "number": self.number,
            "hash": self.hash,
            "transactions": list(self.transactions),
        }


def _sample(number: int, tx_count: int) -> BlockData:
    h = hashlib.sha256(f"blockstars-sample-{number}".encode()).hexdigest()
    txs = [{"index": i, "hash": hashlib.sha256(f"{h}|{i}".encode()).hexdigest()}
           for i in range(tx_count)]
    return BlockData(hash="0x" + h, transactions=tuple(txs), number=number)


# three blocks to experiment with variations: empty, small and busy
SAMPLE_BLOCKS = (
    _sample(1, 0),
    _sample(2, 12),
    _sample(3, 120),
)
