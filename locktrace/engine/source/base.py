# MIT License
# Copyright (c) 2025 Hashborn

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional
from pydantic import ValidationError as ModelValidationError
from . import decode
from ...protocol.types.chain import AccountChainData, ChainHead
from ...protocol.types.common import DataSourceError, ValidationError

logger = logging.getLogger(__name__)


class ChainDataSource(ABC):
    """Query interface over chain state at the current head."""

    @abstractmethod
    def head(self) -> ChainHead:
        """Current (finalized) head the report is computed against."""

    @abstractmethod
    def fetch_account(self, account: str, head: ChainHead) -> AccountChainData:
        """
        Fetch and decode every lock-relevant storage entry of an account.

        Raises:
            DataSourceError: If the data cannot be fetched or decoded
        """


def assemble_account_data(account: str,
                          head: ChainHead,
                          class_locks: Any,
                          voting_for: Callable[[int], Any],
                          referendum_info: Callable[[int], Any],
                          vesting: Any,
                          balance_locks: Any) -> AccountChainData:
    """
    Decode raw storage values into AccountChainData.

    Args:
        account: Account address
        head: Chain head the values were read at
        class_locks: Raw ClassLocksFor value
        voting_for: class id -> raw VotingFor value
        referendum_info: referendum id -> raw ReferendumInfoFor value (None if absent)
        vesting: Raw Vesting value
        balance_locks: Raw Balances.Locks value
    """
    try:
        decoded_class_locks = decode.decode_class_locks(class_locks)

        votes, priors, delegations = [], {}, []
        for class_id in sorted(decoded_class_locks):
            class_votes, prior, delegation = decode.decode_voting(class_id, voting_for(class_id))
            votes.extend(class_votes)
            if prior is not None:
                priors[class_id] = prior
            if delegation is not None:
                delegations.append(delegation)

        referenda = {}
        for referendum_id in sorted({v.referendum_id for v in votes}):
            referendum = decode.decode_referendum(referendum_id, referendum_info(referendum_id))
            if referendum is None:
                logger.warning(f"{account}: referendum {referendum_id} has no on-chain info")
                continue
            referenda[referendum_id] = referendum

        return AccountChainData(
            account=account,
            current_block=head.number,
            votes=votes,
            referenda=referenda,
            priors=priors,
            delegations=delegations,
            vesting=decode.decode_vesting(vesting),
            balance_locks=decode.decode_balance_locks(balance_locks),
            class_locks=decoded_class_locks,
        )
    except (ValidationError, ModelValidationError, AttributeError, KeyError, TypeError, ValueError) as e:
        raise DataSourceError(f"Malformed chain data for {account}: {e}") from e
