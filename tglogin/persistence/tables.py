"""SQLAlchemy table definitions.

These table definitions match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

from tglogin.domain.value import MAX_LOGIN_NAME_LENGTH, TELEGRAM_USER_ID_META_KEY

# Metadata object for all tables
metadata = MetaData()

# Name of the index that keeps one account per Telegram user
EXTERNAL_ID_INDEX = "uq_account_meta_telegram_user_id"

# ============================================================================
# ACCOUNTS TABLE
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("login_name", String(MAX_LOGIN_NAME_LENGTH), nullable=False, unique=True),
    Column("email", String(100), nullable=True),
    Column("password_hash", Text, nullable=False),
    Column("first_name", String(255), nullable=False, server_default=""),
    Column("last_name", String(255), nullable=False, server_default=""),
    Column(
        "roles",
        postgresql.ARRAY(String(50)),
        nullable=False,
        server_default="{}",
    ),
    Column(
        "tenant_ids",
        postgresql.ARRAY(String(50)),
        nullable=False,
        server_default="{}",
    ),
    Column("is_super_admin", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_accounts_email", accounts_table.c.email)

# ============================================================================
# ACCOUNT METADATA TABLE (key/value per account)
# ============================================================================
account_meta_table = Table(
    "account_meta",
    metadata,
    Column(
        "account_id",
        UUID,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("meta_key", String(255), nullable=False),
    Column("meta_value", Text, nullable=False),
    PrimaryKeyConstraint("account_id", "meta_key", name="pk_account_meta"),
)

Index("idx_account_meta_key", account_meta_table.c.meta_key)

# At most one account per Telegram user id
Index(
    EXTERNAL_ID_INDEX,
    account_meta_table.c.meta_value,
    unique=True,
    postgresql_where=account_meta_table.c.meta_key == TELEGRAM_USER_ID_META_KEY,
)
