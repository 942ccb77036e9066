"""create timesheet tables

Revision ID: 3f1a9c2e7d40
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1a9c2e7d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

daycategory = sa.Enum("WORKING", "SICK", "VACATION", name="daycategory")


def upgrade() -> None:
    op.create_table(
        "timesheet_day",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("category", daycategory, nullable=False),
        sa.Column("hours", sa.Float(), nullable=False, server_default="0"),
        sa.UniqueConstraint("date", name="uq_timesheet_day_date"),
    )
    op.create_index("ix_timesheet_day_year", "timesheet_day", ["year"])

    op.create_table(
        "timesheet_year",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("total_vacation_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_sick_days", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_working_hours", sa.Float(), nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("year", name="uq_timesheet_year_year"),
    )


def downgrade() -> None:
    op.drop_table("timesheet_year")
    op.drop_index("ix_timesheet_day_year", table_name="timesheet_day")
    op.drop_table("timesheet_day")
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        daycategory.drop(bind, checkfirst=True)
