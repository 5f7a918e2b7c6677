"""event_reservations

Revision ID: 0002
Revises: 0001
Create Date: 2025-02-24

Adds reservas_evento: seats and waitlist places booked on an agenda event.
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
    op.create_table(
        "reservas_evento",
        sa.Column("reservation_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_id", sa.Integer, sa.ForeignKey("eventos_agenda.event_id"), nullable=False),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("usuarios.user_id"), nullable=True),
        sa.Column("requester_name", sa.String(150), nullable=True),
        sa.Column("requester_email", sa.String(255), nullable=True),
        sa.Column("requester_phone", sa.String(30), nullable=True),
        sa.Column("kind", sa.String(30), nullable=False),
        sa.Column("status", sa.String(30), nullable=False, server_default="pendente"),
        sa.Column("waitlist_position", sa.Integer, nullable=True),
        sa.Column("reason", sa.Text, nullable=True),
        sa.Column("requested_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.CheckConstraint("kind IN ('reserva', 'lista_espera')", name="reservas_evento_tipo_valido"),
    )
    op.create_index("ix_reservas_evento_event_id", "reservas_evento", ["event_id"])
    op.create_index("ix_reservas_evento_user_id", "reservas_evento", ["user_id"])
    op.create_index("ix_reservas_evento_status", "reservas_evento", ["status"])


def downgrade() -> None:
    op.drop_table("reservas_evento")
