"""initial_schema

Create the account store:
- Accounts (login name, email, password hash, names, roles, tenants)
- Account metadata (key/value per account, Telegram user id and username)

Revision ID: 3f1c9a7d2b60
Revises:
Create Date: 2026-10-18 10:12:44.318204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b60"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ========================================================================
    # ACCOUNTS table
    # ========================================================================
    op.create_table(
        "accounts",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("login_name", sa.String(60), nullable=False),
        sa.Column("email", sa.String(100), nullable=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("first_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(255), nullable=False, server_default=""),
        sa.Column(
            "roles",
            postgresql.ARRAY(sa.String(50)),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "tenant_ids",
            postgresql.ARRAY(sa.String(50)),
            nullable=False,
            server_default="{}",
        ),
        sa.Column(
            "is_super_admin", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("login_name", name="uq_accounts_login_name"),
    )
    op.create_index("idx_accounts_email", "accounts", ["email"])

    # ========================================================================
    # ACCOUNT_META table
    # ========================================================================
    op.create_table(
        "account_meta",
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column("meta_key", sa.String(255), nullable=False),
        sa.Column("meta_value", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("account_id", "meta_key", name="pk_account_meta"),
    )
    op.create_index("idx_account_meta_key", "account_meta", ["meta_key"])

    # One account per Telegram user id, enforced even under concurrent logins
    op.create_index(
        "uq_account_meta_telegram_user_id",
        "account_meta",
        ["meta_value"],
        unique=True,
        postgresql_where=sa.text("meta_key = 'tglogin_telegram_user_id'"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("uq_account_meta_telegram_user_id", table_name="account_meta")
    op.drop_index("idx_account_meta_key", table_name="account_meta")
    op.drop_table("account_meta")

    op.drop_index("idx_accounts_email", table_name="accounts")
    op.drop_table("accounts")
