"""Account view models: auth status and bills."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sakpilot.core.models import ViewModel, format_timestamp, str_id, to_bool, to_int


def _billing_month(value: Any) -> str:
    """Render a bill date as YYYY-MM ("" if unparsable)."""
    iso = format_timestamp(value)
    if not iso:
        return ""
    return datetime.fromisoformat(iso).strftime("%Y-%m")


class AuthStatus(ViewModel):
    """Account the credentials authenticate as."""

    account_id: str = ""
    account_name: str = ""
    member_code: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> AuthStatus:
        return cls(
            account_id=str_id(item.get("AccountID")),
            account_name=item.get("AccountName") or "",
            member_code=item.get("MemberCode") or "",
        )


class Bill(ViewModel):
    """Monthly bill of a contract."""

    id: str
    amount: int = 0
    date: str = ""
    paid: bool = False
    pay_limit: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> Bill:
        return cls(
            id=str_id(item.get("BillID") or item.get("ID")),
            amount=to_int(item.get("Amount")),
            date=_billing_month(item.get("Date")),
            paid=to_bool(item.get("Paid")),
            pay_limit=format_timestamp(item.get("PayLimit")),
        )


class BillDetail(ViewModel):
    """Line item of a bill."""

    id: str
    amount: int = 0
    description: str = ""
    service_class_path: str = ""
    usage: int = 0
    formatted_usage: str = ""
    zone: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> BillDetail:
        return cls(
            id=str_id(item.get("ContractID") or item.get("ID")),
            amount=to_int(item.get("Amount")),
            description=item.get("Description") or "",
            service_class_path=item.get("ServiceClassPath") or "",
            usage=to_int(item.get("Usage")),
            formatted_usage=item.get("FormattedUsage") or "",
            zone=item.get("Zone") or "",
        )
