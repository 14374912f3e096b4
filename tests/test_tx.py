"""
Tests for the transaction builder.
"""
import hashlib
from unittest.mock import AsyncMock, MagicMock

import pytest

from cosmwasm_sdk import proto
from cosmwasm_sdk.exceptions import (
    EncodingError, NoAccountsAvailableError, SigningRejectedError, UnregisteredTypeError,
)
from cosmwasm_sdk.models import Fee, coins
from cosmwasm_sdk.registry import MSG_EXECUTE_CONTRACT, MSG_SEND, Registry, TypedMessage
from cosmwasm_sdk.signer import AccountData
from cosmwasm_sdk.tx import SECP256K1_PUBKEY_TYPE_URL, TransactionBuilder, encode_pubkey, make_sign_doc

ADDRESS = "wasm1pkptre7fdkl6gfrzlesjjvhxhlc3r4gmmk8rs6"
PUBKEY = bytes.fromhex("0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798")
SIGNATURE = b"\x11" * 64

FEE = Fee(amount=coins(5000000, "ucosm"), gas_limit=89000000)


def make_signer(accounts=None, signature=SIGNATURE):
    signer = MagicMock()
    signer.get_accounts = AsyncMock(
        return_value=[AccountData(address=ADDRESS, pubkey=PUBKEY)] if accounts is None else accounts
    )
    signer.sign_direct = AsyncMock(return_value=signature)
    return signer


def execute_msg(payload=b'{"release":{}}'):
    return TypedMessage(MSG_EXECUTE_CONTRACT, proto.MsgExecuteContract(
        sender=ADDRESS, contract="wasm1contract", msg=payload,
    ))


async def sign(builder, messages=None, **overrides):
    kwargs = dict(
        signer_address=ADDRESS,
        messages=messages if messages is not None else [execute_msg()],
        fee=FEE,
        memo="hello",
        chain_id="testing",
        account_number=3,
        sequence=7,
    )
    kwargs.update(overrides)
    return await builder.sign(**kwargs)


class TestTransactionBuilder:

    @pytest.mark.asyncio
    async def test_signed_transaction_layout(self):
        signer = make_signer()
        signed = await sign(TransactionBuilder(Registry(), signer))

        assert signed.signatures == (SIGNATURE,)
        assert signed.memo == "hello"
        assert signed.messages[0].type_url == MSG_EXECUTE_CONTRACT

        body = proto.TxBody.FromString(signed.body_bytes)
        assert body.memo == "hello"
        assert [m.type_url for m in body.messages] == [MSG_EXECUTE_CONTRACT]

        auth_info = proto.AuthInfo.FromString(signed.auth_info_bytes)
        assert auth_info.fee.gas_limit == 89000000
        assert auth_info.fee.amount[0].amount == "5000000"
        signer_info = auth_info.signer_infos[0]
        assert signer_info.sequence == 7
        assert signer_info.mode_info.single.mode == proto.SIGN_MODE_DIRECT
        assert signer_info.public_key.type_url == SECP256K1_PUBKEY_TYPE_URL
        assert proto.PubKey.FromString(signer_info.public_key.value).key == PUBKEY

    @pytest.mark.asyncio
    async def test_signer_receives_sign_doc(self):
        signer = make_signer()
        signed = await sign(TransactionBuilder(Registry(), signer))

        signer.sign_direct.assert_awaited_once()
        address, sign_bytes = signer.sign_direct.await_args.args
        assert address == ADDRESS
        expected = make_sign_doc(signed.body_bytes, signed.auth_info_bytes, "testing", 3)
        assert sign_bytes == expected.SerializeToString(deterministic=True)

        sign_doc = proto.SignDoc.FromString(sign_bytes)
        assert sign_doc.chain_id == "testing"
        assert sign_doc.account_number == 3

    @pytest.mark.asyncio
    async def test_sign_bytes_are_deterministic(self):
        first = make_signer()
        second = make_signer()
        await sign(TransactionBuilder(Registry(), first))
        await sign(TransactionBuilder(Registry(), second))
        assert first.sign_direct.await_args.args == second.sign_direct.await_args.args

    @pytest.mark.asyncio
    async def test_tx_bytes_and_hash(self):
        signed = await sign(TransactionBuilder(Registry(), make_signer()))
        tx_raw = proto.TxRaw.FromString(signed.tx_bytes)
        assert tx_raw.body_bytes == signed.body_bytes
        assert tx_raw.auth_info_bytes == signed.auth_info_bytes
        assert list(tx_raw.signatures) == [SIGNATURE]
        assert signed.tx_hash == hashlib.sha256(signed.tx_bytes).hexdigest().upper()

    @pytest.mark.asyncio
    async def test_signed_transaction_is_frozen(self):
        signed = await sign(TransactionBuilder(Registry(), make_signer()))
        with pytest.raises(AttributeError):
            signed.memo = "changed"

    @pytest.mark.asyncio
    async def test_multiple_messages_keep_order(self):
        send = TypedMessage(MSG_SEND, proto.MsgSend(from_address=ADDRESS, to_address="wasm1to"))
        signed = await sign(TransactionBuilder(Registry(), make_signer()), messages=[send, execute_msg()])
        assert [m.type_url for m in signed.messages] == [MSG_SEND, MSG_EXECUTE_CONTRACT]

    @pytest.mark.asyncio
    async def test_no_accounts(self):
        with pytest.raises(NoAccountsAvailableError):
            await sign(TransactionBuilder(Registry(), make_signer(accounts=[])))

    @pytest.mark.asyncio
    async def test_address_not_in_signer(self):
        with pytest.raises(NoAccountsAvailableError):
            await sign(TransactionBuilder(Registry(), make_signer()), signer_address="wasm1other")

    @pytest.mark.asyncio
    async def test_unregistered_message(self):
        signer = make_signer()
        message = TypedMessage("/cosmos.staking.v1beta1.MsgDelegate", proto.MsgSend())
        with pytest.raises(UnregisteredTypeError):
            await sign(TransactionBuilder(Registry(), signer), messages=[message])
        signer.sign_direct.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_signer_exception_becomes_rejection(self):
        signer = make_signer()
        signer.sign_direct.side_effect = RuntimeError("user declined")
        with pytest.raises(SigningRejectedError) as exc_info:
            await sign(TransactionBuilder(Registry(), signer))
        assert "user declined" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_empty_signature_rejected(self):
        with pytest.raises(SigningRejectedError):
            await sign(TransactionBuilder(Registry(), make_signer(signature=b"")))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field,value", [
        ("sequence", -1),
        ("account_number", 2 ** 64),
        ("timeout_height", -5),
    ])
    async def test_out_of_range_numbers(self, field, value):
        with pytest.raises(EncodingError):
            await sign(TransactionBuilder(Registry(), make_signer()), **{field: value})


def test_encode_pubkey_requires_compressed_key():
    with pytest.raises(ValueError):
        encode_pubkey(b"\x04" + b"\x00" * 64)
