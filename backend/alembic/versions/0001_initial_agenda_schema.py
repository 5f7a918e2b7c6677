"""initial_agenda_schema

Revision ID: 0001
Revises:
Create Date: 2025-02-10

Creates the agenda tables: usuarios, anunciantes, usuarios_anunciantes,
eventos_agenda and filas_espera.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # --- usuarios ---
    op.create_table(
        "usuarios",
        sa.Column("user_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- anunciantes ---
    op.create_table(
        "anunciantes",
        sa.Column("advertiser_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- usuarios_anunciantes ---
    op.create_table(
        "usuarios_anunciantes",
        sa.Column("advertiser_id", sa.Integer, sa.ForeignKey("anunciantes.advertiser_id"), primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("usuarios.user_id"), primary_key=True),
        sa.Column("linked_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- eventos_agenda ---
    op.create_table(
        "eventos_agenda",
        sa.Column("event_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("advertiser_id", sa.Integer, sa.ForeignKey("anunciantes.advertiser_id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("color", sa.String(20), nullable=False, server_default="#3B82F6"),
        sa.Column("visibility", sa.String(30), nullable=False, server_default="privado"),
        sa.Column("status", sa.String(30), nullable=False, server_default="pendente"),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("start_time < end_time", name="eventos_agenda_intervalo_valido"),
    )
    op.create_index("ix_eventos_agenda_advertiser_id", "eventos_agenda", ["advertiser_id"])
    op.create_index("ix_eventos_agenda_status", "eventos_agenda", ["status"])

    # --- filas_espera ---
    op.create_table(
        "filas_espera",
        sa.Column("entry_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("requester_id", sa.Integer, sa.ForeignKey("usuarios.user_id"), nullable=False),
        sa.Column("advertiser_id", sa.Integer, sa.ForeignKey("anunciantes.advertiser_id"), nullable=False),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("eventos_agenda.event_id"), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(30), nullable=False, server_default="pendente"),
        sa.Column("rejection_reason", sa.Text, nullable=True),
        sa.Column("suggested_date", sa.Date, nullable=True),
        sa.Column("suggested_time", sa.String(5), nullable=True),
        sa.Column("requested_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.CheckConstraint("start_time < end_time", name="filas_espera_intervalo_valido"),
    )
    op.create_index("ix_filas_espera_requester_id", "filas_espera", ["requester_id"])
    op.create_index("ix_filas_espera_advertiser_id", "filas_espera", ["advertiser_id"])
    op.create_index("ix_filas_espera_event_id", "filas_espera", ["event_id"])
    op.create_index("ix_filas_espera_status", "filas_espera", ["status"])
    op.create_index("ix_filas_espera_requested_at", "filas_espera", ["requested_at"])


def downgrade() -> None:
    op.drop_table("filas_espera")
    op.drop_table("eventos_agenda")
    op.drop_table("usuarios_anunciantes")
    op.drop_table("anunciantes")
    op.drop_table("usuarios")
