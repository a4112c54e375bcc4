# MIT License
# Copyright (c) 2025 Hashborn

"""
Decoding of chain storage values (Substrate API Sidecar JSON) into typed values.

Values arrive in polkadot-js JSON form: enums as single-key objects
({"casting": {...}}, {"approved": [block, deposit, deposit]}), balances and
block numbers as decimal strings, hex strings or plain integers.
"""

from typing import Any, Dict, List, Optional, Tuple
from ...protocol.types.common import Conviction, VoteType, ReferendumStatus, ValidationError
from ...protocol.types.governance import Vote, Referendum, PriorLock, Delegation
from ...protocol.types.vesting import VestingSchedule
from ...protocol.types.locks import BalanceLock

_REFERENDUM_STATUS = {
    "ongoing": ReferendumStatus.ONGOING,
    "approved": ReferendumStatus.APPROVED,
    "rejected": ReferendumStatus.REJECTED,
    "cancelled": ReferendumStatus.CANCELLED,
    "timedout": ReferendumStatus.TIMED_OUT,
    "killed": ReferendumStatus.KILLED,
}

_VOTE_TYPES = {
    "standard": VoteType.STANDARD,
    "split": VoteType.SPLIT,
    "splitabstain": VoteType.SPLIT_ABSTAIN,
}


def to_int(value: Any) -> int:
    """Decode a number given as int, decimal string or 0x-prefixed hex."""
    if isinstance(value, bool):
        raise ValidationError(f"Expected a number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        try:
            if text.lower().startswith("0x"):
                return int(text, 16)
            return int(text)
        except ValueError:
            pass
    raise ValidationError(f"Expected a number, got {value!r}")


def variant(value: Any) -> Tuple[str, Any]:
    """Split a single-key enum object into (lower-cased name, payload)."""
    if isinstance(value, str):
        return value.lower(), None
    if not isinstance(value, dict) or len(value) != 1:
        raise ValidationError(f"Expected an enum variant, got {value!r}")
    name, payload = next(iter(value.items()))
    return name.lower(), payload


def decode_conviction(value: Any) -> Conviction:
    if isinstance(value, str) and not value.lower().startswith("0x") and not value.isdigit():
        name = value.lower()
        if name == "none":
            return Conviction.NONE
        if name.startswith("locked") and name.endswith("x"):
            return Conviction(to_int(name[len("locked"):-1]))
        raise ValidationError(f"Unknown conviction: {value!r}")
    return Conviction(to_int(value))


def decode_vote_byte(value: Any) -> Tuple[bool, Conviction]:
    """Standard vote: either the raw byte (aye = 0x80 bit) or {"aye": .., "conviction": ..}."""
    if isinstance(value, dict):
        return bool(value.get("aye")), decode_conviction(value.get("conviction", 0))

    vote_byte = to_int(value)
    try:
        conviction = Conviction.from_vote_byte(vote_byte)
    except ValueError as e:
        raise ValidationError(str(e))
    return bool(vote_byte & 0x80), conviction


def decode_account_vote(referendum_id: int, value: Any, lock_class: Optional[int] = None) -> Vote:
    name, payload = variant(value)
    vote_type = _VOTE_TYPES.get(name)
    if vote_type is None:
        raise ValidationError(f"Unknown vote type: {name}")

    if vote_type == VoteType.STANDARD:
        aye, conviction = decode_vote_byte(payload["vote"])
        return Vote(
            referendum_id=referendum_id,
            vote_type=vote_type,
            conviction=conviction,
            aye=aye,
            balance=to_int(payload["balance"]),
            lock_class=lock_class,
        )

    # Split votes carry no conviction on chain
    return Vote(
        referendum_id=referendum_id,
        vote_type=vote_type,
        aye_balance=to_int(payload["aye"]),
        nay_balance=to_int(payload["nay"]),
        abstain_balance=to_int(payload["abstain"]) if vote_type == VoteType.SPLIT_ABSTAIN else None,
        lock_class=lock_class,
    )


def decode_prior(value: Any) -> Optional[PriorLock]:
    if value is None:
        return None
    if isinstance(value, dict):
        block, amount = value.get("block", 0), value.get("amount", value.get("balance", 0))
    else:
        block, amount = value
    return PriorLock(unlock_block=to_int(block), amount=to_int(amount))


def decode_voting(lock_class: int, value: Any) -> Tuple[List[Vote], Optional[PriorLock], Optional[Delegation]]:
    """
    Decode a VotingFor(account, class) value.

    Returns:
        (votes, prior lock, delegation) - delegation only for Voting::Delegating
    """
    if value is None:
        return [], None, None

    name, payload = variant(value)
    if name in ("casting", "delegating") and not isinstance(payload, dict):
        raise ValidationError(f"Expected an object for Voting::{name}, got {payload!r}")

    if name == "casting":
        votes = [
            decode_account_vote(to_int(ref_id), account_vote, lock_class)
            for ref_id, account_vote in payload.get("votes", [])
        ]
        return votes, decode_prior(payload.get("prior")), None

    if name == "delegating":
        delegation = Delegation(
            target=str(payload["target"]),
            balance=to_int(payload["balance"]),
            conviction=decode_conviction(payload.get("conviction", 0)),
            lock_class=lock_class,
            prior=decode_prior(payload.get("prior")),
        )
        return [], None, delegation

    raise ValidationError(f"Unknown voting variant: {name}")


def decode_referendum(referendum_id: int, value: Any) -> Optional[Referendum]:
    """Decode ReferendumInfoFor; None when the chain has no entry."""
    if value is None:
        return None

    name, payload = variant(value)
    status = _REFERENDUM_STATUS.get(name)
    if status is None:
        raise ValidationError(f"Unknown referendum status: {name}")

    if status == ReferendumStatus.ONGOING:
        submitted = payload.get("submitted") if isinstance(payload, dict) else None
        return Referendum(
            id=referendum_id,
            status=status,
            submitted_block=to_int(submitted) if submitted is not None else None,
        )

    # Approved/Rejected/Cancelled/TimedOut are (block, deposit, deposit); Killed is (block)
    block = payload[0] if isinstance(payload, (list, tuple)) else payload
    return Referendum(id=referendum_id, status=status, conclusion_block=to_int(block))


def decode_vesting(value: Any) -> List[VestingSchedule]:
    if value is None:
        return []
    entries = value if isinstance(value, list) else [value]
    return [
        VestingSchedule(
            locked=to_int(entry["locked"]),
            per_block=to_int(entry["perBlock"] if "perBlock" in entry else entry["per_block"]),
            starting_block=to_int(entry["startingBlock"] if "startingBlock" in entry else entry["starting_block"]),
        )
        for entry in entries
    ]


def decode_lock_id(value: str) -> str:
    """Lock ids are 8 raw bytes; sidecar renders them as hex."""
    if isinstance(value, str) and value.lower().startswith("0x"):
        try:
            return bytes.fromhex(value[2:]).decode("utf-8")
        except (ValueError, UnicodeDecodeError):
            return value
    return str(value)


def decode_balance_locks(value: Any) -> List[BalanceLock]:
    if value is None:
        return []
    return [
        BalanceLock(
            id=decode_lock_id(entry["id"]),
            amount=to_int(entry["amount"]),
            reasons=entry.get("reasons"),
        )
        for entry in value
    ]


def decode_class_locks(value: Any) -> Dict[int, int]:
    if value is None:
        return {}
    return {to_int(class_id): to_int(amount) for class_id, amount in value}
