"""initial

Revision ID: 3f1c9a2b7e40
Revises:
Create Date: 2026-10-18 09:12:44.120391

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f1c9a2b7e40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _updated_at_trigger(table: str) -> None:
    op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")
    op.execute(
        f"""
        CREATE TRIGGER update_{table}_updated_at
        BEFORE UPDATE ON {table}
        FOR EACH ROW
        EXECUTE FUNCTION update_updated_at_column();
    """
    )


def upgrade() -> None:
    op.execute(
        """
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = now();
            RETURN NEW;
        END;
        $$ language 'plpgsql';
    """
    )

    op.create_table(
        "livestocks",
        sa.Column("rfid", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("owner_email", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("breed", sa.String(), nullable=True),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("sex", sa.String(), nullable=True),
        sa.Column("species", sa.String(), nullable=True),
        sa.Column("photo_url", sa.String(), nullable=True),
        sa.Column("vaccines", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column(
            "is_public", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("rfid"),
    )
    op.create_index("idx_livestocks_user_id", "livestocks", ["user_id"])
    op.create_index("idx_livestocks_is_public", "livestocks", ["is_public"])
    _updated_at_trigger("livestocks")

    op.create_table(
        "devices",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("serial_number", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("owner_user_id", sa.String(), nullable=False),
        sa.Column("owner_email", sa.String(), nullable=True),
        sa.Column(
            "status", sa.String(), server_default=sa.text("'pending'"), nullable=False
        ),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by", sa.String(), nullable=True),
        sa.Column("approved_by_email", sa.String(), nullable=True),
        sa.Column("last_seen_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("serial_number", name="uq_devices_serial_number"),
        sa.CheckConstraint(
            "status IN ('pending', 'active', 'inactive', 'revoked')",
            name="ck_devices_status",
        ),
    )
    op.create_index("idx_devices_owner_user_id", "devices", ["owner_user_id"])
    op.create_index("idx_devices_status", "devices", ["status"])
    _updated_at_trigger("devices")

    op.create_table(
        "weights",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("rfid", sa.String(), nullable=False),
        sa.Column("device_id", sa.String(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["rfid"], ["livestocks.rfid"], name="fk_weights_livestock"),
        sa.ForeignKeyConstraint(["device_id"], ["devices.id"], name="fk_weights_device"),
    )
    op.create_index("idx_weights_rfid", "weights", ["rfid"])
    op.create_index("idx_weights_device_id", "weights", ["device_id"])
    op.create_index("idx_weights_created_at", "weights", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_weights_created_at", table_name="weights")
    op.drop_index("idx_weights_device_id", table_name="weights")
    op.drop_index("idx_weights_rfid", table_name="weights")
    op.drop_table("weights")

    op.execute("DROP TRIGGER IF EXISTS update_devices_updated_at ON devices")
    op.drop_index("idx_devices_status", table_name="devices")
    op.drop_index("idx_devices_owner_user_id", table_name="devices")
    op.drop_table("devices")

    op.execute("DROP TRIGGER IF EXISTS update_livestocks_updated_at ON livestocks")
    op.drop_index("idx_livestocks_is_public", table_name="livestocks")
    op.drop_index("idx_livestocks_user_id", table_name="livestocks")
    op.drop_table("livestocks")

    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")
