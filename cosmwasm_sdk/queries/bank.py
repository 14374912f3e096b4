"""
Bank query extension.
"""
from typing import List

from .. import proto
from ..models import Coin
from .extension import QueryClient, QueryExtension

QUERY_SERVICE = "/cosmos.bank.v1beta1.Query"


async def balance(client: QueryClient, address: str, denom: str) -> Coin:
    """Balance of one denomination; zero when the account holds none."""
    response = await client.query_proto(
        f"{QUERY_SERVICE}/Balance",
        proto.QueryBalanceRequest(address=address, denom=denom),
        proto.QueryBalanceResponse,
    )
    if not response.HasField("balance"):
        return Coin(denom=denom, amount="0")
    return Coin(denom=response.balance.denom or denom, amount=response.balance.amount or "0")


async def all_balances(client: QueryClient, address: str) -> List[Coin]:
    balances = await client.query_all_pages(
        f"{QUERY_SERVICE}/AllBalances",
        lambda page: proto.QueryAllBalancesRequest(address=address, pagination=page),
        proto.QueryAllBalancesResponse,
        "balances",
    )
    return [Coin(denom=c.denom, amount=c.amount) for c in balances]


def setup_bank_extension() -> QueryExtension:
    return QueryExtension("bank", {"balance": balance, "all_balances": all_balances})
