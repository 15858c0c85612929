"""Create AIRCTT coupon, wallet and game tables (UUID ids)

Revision ID: a1c7e2f40b15
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "a1c7e2f40b15"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "merchants",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("owner_user_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=True),
        sa.Column("region", sa.String(length=32), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_merchants_owner_user_id", "merchants", ["owner_user_id"], unique=False)

    op.create_table(
        "stores",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("merchant_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("address", sa.String(length=256), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("location", sa.String(length=128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["merchant_id"], ["merchants.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_stores_merchant_id", "stores", ["merchant_id"], unique=False)

    op.create_table(
        "coupons",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("merchant_id", sa.Uuid(), nullable=True),
        sa.Column("store_id", sa.Uuid(), nullable=True),
        sa.Column("title", sa.String(length=128), nullable=False),
        sa.Column("description", sa.String(length=512), nullable=True),
        sa.Column("discount_type", sa.String(length=16), nullable=False),
        sa.Column("discount_value", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("stock_initial", sa.Integer(), nullable=True),
        sa.Column("stock_remaining", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="active"),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["merchant_id"], ["merchants.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["store_id"], ["stores.id"], ondelete="SET NULL"),
        sa.CheckConstraint("stock_remaining IS NULL OR stock_remaining >= 0", name="ck_coupons_stock"),
    )
    op.create_index("ix_coupons_merchant_id", "coupons", ["merchant_id"], unique=False)
    op.create_index("ix_coupons_status", "coupons", ["status"], unique=False)

    op.create_table(
        "coupon_issues",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("coupon_id", sa.Uuid(), nullable=False),
        sa.Column("consumer_id", sa.Uuid(), nullable=False),
        sa.Column("code", sa.String(length=32), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="ISSUED"),
        sa.Column("issued_reason", sa.String(length=16), nullable=False, server_default="MANUAL"),
        sa.Column("issued_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("used_store_id", sa.Uuid(), nullable=True),
        sa.ForeignKeyConstraint(["coupon_id"], ["coupons.id"]),
        sa.ForeignKeyConstraint(["used_store_id"], ["stores.id"]),
    )
    op.create_index("ix_coupon_issues_coupon_id", "coupon_issues", ["coupon_id"], unique=False)
    op.create_index("ix_coupon_issues_consumer_id", "coupon_issues", ["consumer_id"], unique=False)
    op.create_index("ix_coupon_issues_code", "coupon_issues", ["code"], unique=True)

    op.create_table(
        "wallets",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("consumer_id", sa.Uuid(), nullable=False),
        sa.Column("total_points", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_wallets_consumer_id", "wallets", ["consumer_id"], unique=True)

    op.create_table(
        "game_sessions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("consumer_id", sa.Uuid(), nullable=False),
        sa.Column("game_type", sa.String(length=64), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("steps_cleared", sa.Integer(), nullable=True),
        sa.Column("success", sa.Boolean(), nullable=True),
        sa.Column("client_info", sa.JSON(), nullable=True),
    )
    op.create_index("ix_game_sessions_consumer_id", "game_sessions", ["consumer_id"], unique=False)

    op.create_table(
        "wallet_transactions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("wallet_id", sa.Uuid(), nullable=False),
        sa.Column("tx_type", sa.String(length=32), nullable=False),
        sa.Column("amount_points", sa.Integer(), nullable=False),
        sa.Column("related_game_session_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["wallet_id"], ["wallets.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["related_game_session_id"], ["game_sessions.id"]),
    )
    op.create_index(
        "ix_wallet_transactions_wallet_id", "wallet_transactions", ["wallet_id"], unique=False
    )

    op.create_table(
        "game_rewards",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("game_session_id", sa.Uuid(), nullable=False),
        sa.Column("reward_type", sa.String(length=32), nullable=False),
        sa.Column("reward_value", sa.Integer(), nullable=True),
        sa.Column("created_coupon_issue_id", sa.Uuid(), nullable=True),
        sa.Column("created_wallet_tx_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("claimed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["game_session_id"], ["game_sessions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_coupon_issue_id"], ["coupon_issues.id"]),
        sa.ForeignKeyConstraint(["created_wallet_tx_id"], ["wallet_transactions.id"]),
        sa.CheckConstraint(
            "created_coupon_issue_id IS NULL OR created_wallet_tx_id IS NULL",
            name="ck_game_rewards_single_payout",
        ),
    )
    op.create_index(
        "ix_game_rewards_game_session_id", "game_rewards", ["game_session_id"], unique=True
    )


def downgrade() -> None:
    op.drop_index("ix_game_rewards_game_session_id", table_name="game_rewards")
    op.drop_table("game_rewards")
    op.drop_index("ix_wallet_transactions_wallet_id", table_name="wallet_transactions")
    op.drop_table("wallet_transactions")
    op.drop_index("ix_game_sessions_consumer_id", table_name="game_sessions")
    op.drop_table("game_sessions")
    op.drop_index("ix_wallets_consumer_id", table_name="wallets")
    op.drop_table("wallets")
    op.drop_index("ix_coupon_issues_code", table_name="coupon_issues")
    op.drop_index("ix_coupon_issues_consumer_id", table_name="coupon_issues")
    op.drop_index("ix_coupon_issues_coupon_id", table_name="coupon_issues")
    op.drop_table("coupon_issues")
    op.drop_index("ix_coupons_status", table_name="coupons")
    op.drop_index("ix_coupons_merchant_id", table_name="coupons")
    op.drop_table("coupons")
    op.drop_index("ix_stores_merchant_id", table_name="stores")
    op.drop_table("stores")
    op.drop_index("ix_merchants_owner_user_id", table_name="merchants")
    op.drop_table("merchants")
