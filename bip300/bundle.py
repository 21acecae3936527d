"""Blinded ids for withdrawal bundles (M6 transactions).

A bundle is referenced (in M3 and M4) by the txid of a "blinded" copy
of itself: the input spending the previous treasury output is removed,
since its outpoint cannot be known when the id is first committed to,
and an output committing to the total fee is appended instead.

"""
from .errors import ArithmeticUnderflowError
from .tags import OP_RETURN_BYTE
from bitcoin.core import CMutableTransaction, CMutableTxOut, CTransaction, CTxWitness
from bitcoin.core.script import CScript
import struct

MAX_U64 = 0xFFFFFFFFFFFFFFFF


def blind_bundle(tx: CTransaction, previous_treasury_total: int) -> CMutableTransaction:
    """Return the blinded copy of the bundle `tx`; `tx` is not modified.

Output 0 of a bundle is the new treasury output, every other output is
a payout.  The fee is whatever the previous treasury total does not
account for:

    F_total = T_prev - T_new - P_total

and is appended as a zero-value OP_RETURN output holding F_total as a
big-endian u64.
    """
    if not isinstance(previous_treasury_total, int) or not 0 <= previous_treasury_total <= MAX_U64:
        raise ValueError("previous_treasury_total must be a u64, {!r} received"
                         .format(previous_treasury_total))
    if len(tx.vout) == 0:
        raise ValueError("bundle has no treasury output")
    for i, txout in enumerate(tx.vout):
        if not 0 <= txout.nValue <= MAX_U64:
            raise ValueError("output {} has invalid value {}".format(i, txout.nValue))

    blinded = CMutableTransaction.from_tx(tx)
    blinded.vin = []
    blinded.wit = CTxWitness()

    payout_total = sum(o.nValue for o in blinded.vout[1:])
    treasury_total = blinded.vout[0].nValue
    fee_total = previous_treasury_total - treasury_total - payout_total
    if fee_total < 0:
        raise ArithmeticUnderflowError(
            "bundle spends {} (treasury {} + payouts {}) but previous treasury is {}"
            .format(treasury_total + payout_total, treasury_total,
                    payout_total, previous_treasury_total))

    script = CScript(OP_RETURN_BYTE + struct.pack("!Q", fee_total))
    blinded.vout.append(CMutableTxOut(0, script))
    return blinded


def derive_bundle_id(tx: CTransaction, previous_treasury_total: int) -> bytes:
    """The 32-byte blinded id of a bundle, in internal byte order"""
    return blind_bundle(tx, previous_treasury_total).GetTxid()
