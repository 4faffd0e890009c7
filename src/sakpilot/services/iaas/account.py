"""Account-level managers: authentication status and billing."""

from __future__ import annotations

from sakpilot.integrations.iaas import IaaSClient
from sakpilot.integrations.iaas.models import AuthStatus, Bill, BillDetail
from sakpilot.services.base import BaseResourceManager


class AuthStatusManager(BaseResourceManager[IaaSClient]):
    _family = "auth_status"
    _entity_name = "auth_status"

    def get(self, profile_name: str) -> AuthStatus:
        """Get the account the profile's credentials authenticate as."""
        with self._session(profile_name) as (client, _):
            return AuthStatus.from_api(client.auth_status())


class BillManager(BaseResourceManager[IaaSClient]):
    """Manager for monthly bills.

    Bills are listed per contract account. When no account ID is given, the
    one the profile authenticates as is looked up first.
    """

    _family = "bills"
    _entity_name = "bill"

    def list_by_contract(self, profile_name: str, account_id: str = "") -> list[Bill]:
        with self._session(profile_name) as (client, _):
            if not account_id:
                account_id = AuthStatus.from_api(client.auth_status()).account_id
            bills = client.bills_by_contract(account_id)
        self._log.debug("listed_entities", account_id=account_id, count=len(bills))
        return [Bill.from_api(b) for b in bills]

    def get_details(self, profile_name: str, member_code: str, bill_id: str) -> list[BillDetail]:
        with self._session(profile_name) as (client, _):
            details = client.bill_details(member_code, bill_id)
        return [BillDetail.from_api(d) for d in details]
