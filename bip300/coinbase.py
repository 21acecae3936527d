from .decoder import decode
from .errors import UnrecognizedTagError
from .messages import (
    AckBundles,
    AckSidechain,
    ActivationMarker,
    BmmAccept,
    BundleVote,
    CoinbaseMessage,
    ProposeBundle,
    ProposeSidechain,
)
from bitcoin.core import CMutableTxOut, CTransaction
from typing import List, Tuple
import logging


class CoinbaseBuilder(object):
    """Collects messages for the trailing outputs of a coinbase.

Each method appends one message and returns the builder, so calls can be
chained; `build()` may only be called once.  No cross-message checks
(duplicates, conflicting votes) are made here.

    """
    def __init__(self, logger=logging):
        self.messages: List[CoinbaseMessage] = []
        self.logger = logger
        self.built = False

    def append(self, message: CoinbaseMessage) -> 'CoinbaseBuilder':
        if self.built:
            raise RuntimeError("CoinbaseBuilder has already been built")
        if not isinstance(message, CoinbaseMessage):
            raise TypeError("{} is not a coinbase message".format(type(message)))
        self.logger.debug("Appending coinbase message %r", message)
        self.messages.append(message)
        return self

    def propose_sidechain(self, sidechain_number: int, data: bytes) -> 'CoinbaseBuilder':
        return self.append(ProposeSidechain(sidechain_number, data))

    def ack_sidechain(self, sidechain_number: int, data_hash: bytes) -> 'CoinbaseBuilder':
        return self.append(AckSidechain(sidechain_number, data_hash))

    def propose_bundle(self, sidechain_number: int, bundle_id: bytes) -> 'CoinbaseBuilder':
        return self.append(ProposeBundle(sidechain_number, bundle_id))

    def ack_bundles(self, vote: BundleVote) -> 'CoinbaseBuilder':
        return self.append(AckBundles(vote))

    def bmm_accept(self, sidechain_number: int, sidechain_block_hash: bytes) -> 'CoinbaseBuilder':
        return self.append(BmmAccept(sidechain_number, sidechain_block_hash))

    def activate_sidechain(self, sidechain_number: int) -> 'CoinbaseBuilder':
        return self.append(ActivationMarker(sidechain_number))

    def build(self) -> List[CMutableTxOut]:
        if self.built:
            raise RuntimeError("CoinbaseBuilder has already been built")
        self.built = True
        outputs = [m.to_txout() for m in self.messages]
        self.logger.debug("Built %d coinbase message outputs", len(outputs))
        return outputs


def decode_coinbase(tx: CTransaction, activation_marker: bool = True,
                    logger=logging) -> List[Tuple[int, CoinbaseMessage]]:
    """Decode every signalling output of a coinbase transaction.

Returns (output index, message) pairs in output order.  Outputs that
are simply not signalling messages are skipped; any other DecodeError
(a malformed signalling message) propagates.
    """
    ret = []
    for i, txout in enumerate(tx.vout):
        try:
            m = decode(txout.scriptPubKey, activation_marker=activation_marker)
        except UnrecognizedTagError:
            logger.debug("Coinbase output %d is not a signalling message", i)
            continue
        ret.append((i, m))
    return ret
