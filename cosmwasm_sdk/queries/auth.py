"""
Auth query extension.
"""
import logging

from google.protobuf.message import DecodeError

from .. import proto
from ..exceptions import ResponseDecodeError
from ..models import AccountInfo
from .extension import QueryClient, QueryExtension

logger = logging.getLogger(__name__)

QUERY_SERVICE = "/cosmos.auth.v1beta1.Query"
BASE_ACCOUNT_TYPE_URL = "/cosmos.auth.v1beta1.BaseAccount"
SECP256K1_PUBKEY_TYPE_URL = "/cosmos.crypto.secp256k1.PubKey"


async def account(client: QueryClient, address: str) -> AccountInfo:
    """
    Account number, sequence and public key of an account.

    The public key is None until the account has signed a transaction.

    Raises:
        NotFoundError: If the account does not exist yet
        ResponseDecodeError: For account types other than BaseAccount
    """
    response = await client.query_proto(
        f"{QUERY_SERVICE}/Account",
        proto.QueryAccountRequest(address=address),
        proto.QueryAccountResponse,
    )
    if response.account.type_url != BASE_ACCOUNT_TYPE_URL:
        raise ResponseDecodeError(f"Unsupported account type: {response.account.type_url or '<empty>'}")

    try:
        base = proto.BaseAccount.FromString(response.account.value)
        pubkey = None
        if base.HasField("pub_key"):
            if base.pub_key.type_url != SECP256K1_PUBKEY_TYPE_URL:
                raise ResponseDecodeError(f"Unsupported public key type: {base.pub_key.type_url}")
            pubkey = proto.PubKey.FromString(base.pub_key.value).key
    except DecodeError as e:
        raise ResponseDecodeError(f"Failed to decode account {address}: {e}") from e

    return AccountInfo(
        address=base.address or address,
        pubkey=pubkey,
        account_number=base.account_number,
        sequence=base.sequence,
    )


def setup_auth_extension() -> QueryExtension:
    return QueryExtension("auth", {"account": account})
