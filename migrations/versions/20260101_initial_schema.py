"""initial schema: users, workshops, payments, attendance

Revision ID: 20260101_initial_schema
Revises:
Create Date: 2026-01-01 00:00:00
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20260101_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "user_types",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(60), nullable=False),
        sa.UniqueConstraint("name", name="uq_user_types_name"),
    )

    # FK instructor_user_id -> users é criada depois (ciclo users <-> workshops)
    op.create_table(
        "workshops",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("spots_max", sa.Integer(), nullable=True),
        sa.Column("spots_occupied", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("building", sa.String(120), nullable=True),
        sa.Column("classroom", sa.String(120), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("instructor_user_id", sa.Integer(), nullable=True),
        sa.Column("instructor_name", sa.String(200), nullable=True),
        sa.Column("level", sa.String(30), nullable=True),
        sa.Column("category", sa.String(80), nullable=True),
        sa.Column("tools", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("paternal_surname", sa.String(120), nullable=True),
        sa.Column("maternal_surname", sa.String(120), nullable=True),
        sa.Column("email", sa.String(160), nullable=False),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("matricula", sa.String(40), nullable=True),
        sa.Column("educational_program", sa.String(160), nullable=True),
        sa.Column("provenance", sa.String(160), nullable=True),
        sa.Column("grade", sa.String(20), nullable=True),
        sa.Column("group_name", sa.String(20), nullable=True),
        sa.Column("hashed_password", sa.String(255), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("status_event", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_badge_printed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("user_type_id", sa.Integer(), sa.ForeignKey("user_types.id", name="fk_users_user_type_id_user_types"), nullable=True),
        sa.Column("workshop_id", sa.Integer(), sa.ForeignKey("workshops.id", name="fk_users_workshop_id_workshops"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("matricula", name="uq_users_matricula"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_workshop_id", "users", ["workshop_id"])

    if op.get_bind().dialect.name != "sqlite":
        op.create_foreign_key(
            "fk_workshops_instructor_user_id_users", "workshops", "users",
            ["instructor_user_id"], ["id"],
        )

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("session_id", sa.String(255), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", name="fk_payments_user_id_users"), nullable=True),
        sa.Column("status", sa.String(30), nullable=True),
        sa.Column("payment_status", sa.String(30), nullable=True),
        sa.Column("payment_intent_status", sa.String(30), nullable=True),
        sa.Column("amount_total", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(10), nullable=False, server_default="mxn"),
        sa.Column("customer_email", sa.String(160), nullable=True),
        sa.Column("client_reference_id", sa.String(64), nullable=True),
        sa.Column("metadata_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    )
    op.create_index("ix_payments_session_id", "payments", ["session_id"], unique=True)
    op.create_index("ix_payments_user_id", "payments", ["user_id"])

    op.create_table(
        "qr_codes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("token", sa.String(255), nullable=False),
        sa.Column("workshop_id", sa.Integer(), sa.ForeignKey("workshops.id", name="fk_qr_codes_workshop_id_workshops"), nullable=False),
        sa.UniqueConstraint("token", "workshop_id", name="uq_qr_code_token_workshop"),
    )
    op.create_index("ix_qr_codes_workshop_id", "qr_codes", ["workshop_id"])

    op.create_table(
        "attendances",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", name="fk_attendances_user_id_users"), nullable=False),
        sa.Column("qr_code_id", sa.Integer(), sa.ForeignKey("qr_codes.id", name="fk_attendances_qr_code_id_qr_codes"), nullable=True),
        sa.Column("date_time", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_attendances_user_id", "attendances", ["user_id"])
    op.create_index("ix_attendances_qr_code_id", "attendances", ["qr_code_id"])
    op.create_index(
        "uq_attendances_user_scope",
        "attendances",
        ["user_id", sa.text("coalesce(qr_code_id, 0)")],
        unique=True,
    )


def downgrade():
    op.drop_index("uq_attendances_user_scope", table_name="attendances")
    op.drop_table("attendances")
    op.drop_table("qr_codes")
    op.drop_table("payments")
    if op.get_bind().dialect.name != "sqlite":
        op.drop_constraint("fk_workshops_instructor_user_id_users", "workshops", type_="foreignkey")
    op.drop_index("ix_users_workshop_id", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    op.drop_table("workshops")
    op.drop_table("user_types")
