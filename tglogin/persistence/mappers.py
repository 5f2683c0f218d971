"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict, Iterable
from uuid import UUID

from tglogin.domain.model import LocalAccount
from tglogin.domain.value import AccountId


def row_to_account(
    row: Dict[str, Any], meta_rows: Iterable[Dict[str, Any]] = ()
) -> LocalAccount:
    """Convert an accounts row and its metadata rows to a LocalAccount.

    Args:
        row: Accounts row as dict
        meta_rows: account_meta rows for the same account

    Returns:
        LocalAccount domain model
    """
    return LocalAccount(
        id=AccountId(UUID(row["id"]) if isinstance(row["id"], str) else row["id"]),
        login_name=row["login_name"],
        email=row.get("email"),
        first_name=row.get("first_name") or "",
        last_name=row.get("last_name") or "",
        roles=list(row.get("roles") or []),
        tenant_ids=list(row.get("tenant_ids") or []),
        is_super_admin=bool(row.get("is_super_admin", False)),
        metadata={meta["meta_key"]: meta["meta_value"] for meta in meta_rows},
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
