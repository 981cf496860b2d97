"""refresh tokens, email confirmation and one-time codes

Revision ID: 0002
Revises: 0001
Create Date: 2025-11-02 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "users",
        sa.Column("email_confirmed", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.add_column("users", sa.Column("refresh_token", sa.String(512), nullable=True))
    op.add_column("users", sa.Column("refresh_token_expires_at", sa.DateTime(timezone=True), nullable=True))

    op.create_table(
        "user_otps",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("purpose", sa.String(20), nullable=False),
        sa.Column("otp_code", sa.String(6), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_user_otps_id", "user_otps", ["id"])
    op.create_index("ix_user_otps_user_id", "user_otps", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_user_otps_user_id", table_name="user_otps")
    op.drop_index("ix_user_otps_id", table_name="user_otps")
    op.drop_table("user_otps")
    op.drop_column("users", "refresh_token_expires_at")
    op.drop_column("users", "refresh_token")
    op.drop_column("users", "email_confirmed")
