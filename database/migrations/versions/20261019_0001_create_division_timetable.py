"""create division timetable tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def _division_columns() -> list[sa.Column]:
    return [
        sa.Column("program", sa.String(length=100), nullable=False),
        sa.Column("class_name", sa.String(length=20), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("division", sa.String(length=10), nullable=False),
    ]


def upgrade() -> None:
    entry_status = sa.Enum("valid", "conflict", name="lecture_entry_status")

    op.create_table(
        "teachers",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("teacher_code", sa.String(length=50), nullable=False),
        sa.Column("faculty_name", sa.String(length=200), nullable=False),
        sa.Column("subject_name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("department", sa.String(length=200), nullable=False),
        sa.Column("teaching_hours", sa.Integer(), nullable=False),
        sa.Column("teacher_number", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_teachers_teacher_code", "teachers", ["teacher_code"], unique=True)

    op.create_table(
        "subjects",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        sa.Column("subject_code", sa.String(length=50), nullable=False),
        sa.Column("subject_name", sa.String(length=200), nullable=False),
        sa.Column("required_periods", sa.Integer(), nullable=False),
        sa.Column(
            "teacher_id",
            sa.String(length=36),
            sa.ForeignKey("teachers.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_subjects_subject_code", "subjects", ["subject_code"], unique=True)
    op.create_index("ix_subjects_teacher_id", "subjects", ["teacher_id"], unique=False)

    op.create_table(
        "classrooms",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        *_division_columns(),
        sa.Column("year", sa.String(length=20), nullable=True),
        sa.Column("room_number", sa.String(length=50), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("program", "class_name", "semester", "division", name="uq_classrooms_division"),
    )

    op.create_table(
        "lecture_entries",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        *_division_columns(),
        sa.Column("day", sa.String(length=10), nullable=False),
        sa.Column("time_slot", sa.String(length=20), nullable=False),
        sa.Column("subject_id", sa.String(length=36), sa.ForeignKey("subjects.id"), nullable=False),
        sa.Column("teacher_id", sa.String(length=36), sa.ForeignKey("teachers.id"), nullable=False),
        sa.Column(
            "classroom_id",
            sa.String(length=36),
            sa.ForeignKey("classrooms.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", entry_status, nullable=False, server_default="valid"),
        sa.Column("created_by", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint(
            "program", "class_name", "semester", "division", "day", "time_slot",
            name="uq_lecture_entries_division_slot",
        ),
        sa.UniqueConstraint("teacher_id", "day", "time_slot", name="uq_lecture_entries_teacher_slot"),
    )
    op.create_index(
        "ix_lecture_entries_division",
        "lecture_entries",
        ["program", "class_name", "semester", "division"],
        unique=False,
    )
    op.create_index("ix_lecture_entries_subject_id", "lecture_entries", ["subject_id"], unique=False)
    op.create_index("ix_lecture_entries_teacher_id", "lecture_entries", ["teacher_id"], unique=False)
    op.create_index("ix_lecture_entries_classroom_id", "lecture_entries", ["classroom_id"], unique=False)

    op.create_table(
        "weekly_configs",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        *_division_columns(),
        sa.Column("holidays", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("program", "class_name", "semester", "division", name="uq_weekly_configs_division"),
    )

    op.create_table(
        "weekly_timetables",
        sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
        *_division_columns(),
        sa.Column("holidays", sa.JSON(), nullable=False),
        sa.Column("entry_ids", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            "program", "class_name", "semester", "division", name="uq_weekly_timetables_division"
        ),
    )


def downgrade() -> None:
    op.drop_table("weekly_timetables")
    op.drop_table("weekly_configs")
    op.drop_index("ix_lecture_entries_classroom_id", table_name="lecture_entries")
    op.drop_index("ix_lecture_entries_teacher_id", table_name="lecture_entries")
    op.drop_index("ix_lecture_entries_subject_id", table_name="lecture_entries")
    op.drop_index("ix_lecture_entries_division", table_name="lecture_entries")
    op.drop_table("lecture_entries")
    op.drop_table("classrooms")
    op.drop_index("ix_subjects_teacher_id", table_name="subjects")
    op.drop_index("ix_subjects_subject_code", table_name="subjects")
    op.drop_table("subjects")
    op.drop_index("ix_teachers_teacher_code", table_name="teachers")
    op.drop_table("teachers")
    sa.Enum(name="lecture_entry_status").drop(op.get_bind(), checkfirst=True)
