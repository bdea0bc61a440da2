"""initial_rsvp_schema

Revision ID: 3f1c2a7b9d10
Revises:
Create Date: 2026-10-01 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a7b9d10"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.current_timestamp(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "wedding_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("couple_names", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("location", sa.String(length=500), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("rsvp_deadline", sa.Date(), nullable=True),
        sa.Column("email_provider", sa.String(length=50), nullable=True),
        sa.Column("email_api_key", sa.String(length=255), nullable=True),
        sa.Column("email_from_address", sa.String(length=255), nullable=True),
        sa.Column("whatsapp_business_phone_id", sa.String(length=100), nullable=True),
        sa.Column("whatsapp_access_token", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "guests",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("wedding_events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("first_name", sa.String(length=255), nullable=False),
        sa.Column("last_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column(
            "rsvp_status",
            sa.Enum("pending", "confirmed", "declined", name="guest_status_enum"),
            nullable=False,
        ),
        sa.Column("rsvp_date", sa.Date(), nullable=True),
        sa.Column("is_local_guest", sa.Boolean(), nullable=False),
        sa.Column("plus_one_allowed", sa.Boolean(), nullable=False),
        sa.Column("plus_one_confirmed", sa.Boolean(), nullable=False),
        sa.Column("plus_one_name", sa.String(length=255), nullable=True),
        sa.Column("plus_one_email", sa.String(length=255), nullable=True),
        sa.Column("plus_one_phone", sa.String(length=50), nullable=True),
        sa.Column("plus_one_gender", sa.String(length=20), nullable=True),
        sa.Column("children_details", sa.JSON(), nullable=False),
        sa.Column("number_of_children", sa.Integer(), nullable=False),
        sa.Column("children_notes", sa.Text(), nullable=True),
        sa.Column("dietary_restrictions", sa.Text(), nullable=True),
        sa.Column("allergies", sa.Text(), nullable=True),
        sa.Column("needs_accommodation", sa.Boolean(), nullable=False),
        sa.Column("accommodation_preference", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_guests_event_id", "guests", ["event_id"])
    op.create_index("ix_guests_first_name", "guests", ["first_name"])
    op.create_index("ix_guests_last_name", "guests", ["last_name"])

    op.create_table(
        "ceremonies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("wedding_events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.String(length=10), nullable=False),
        sa.Column("end_time", sa.String(length=10), nullable=False),
        sa.Column("location", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("attire_code", sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_ceremonies_event_id", "ceremonies", ["event_id"])

    op.create_table(
        "guest_ceremonies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "guest_id",
            sa.Integer(),
            sa.ForeignKey("guests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "ceremony_id",
            sa.Integer(),
            sa.ForeignKey("ceremonies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("attending", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("guest_id", "ceremony_id", name="uq_guest_ceremony"),
    )
    op.create_index("ix_guest_ceremonies_guest_id", "guest_ceremonies", ["guest_id"])

    op.create_table(
        "meal_options",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("wedding_events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "ceremony_id",
            sa.Integer(),
            sa.ForeignKey("ceremonies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_vegetarian", sa.Boolean(), nullable=False),
        sa.Column("is_vegan", sa.Boolean(), nullable=False),
        sa.Column("is_gluten_free", sa.Boolean(), nullable=False),
        sa.Column("is_nut_free", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_meal_options_ceremony_id", "meal_options", ["ceremony_id"])

    op.create_table(
        "guest_meal_selections",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "guest_id",
            sa.Integer(),
            sa.ForeignKey("guests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "ceremony_id",
            sa.Integer(),
            sa.ForeignKey("ceremonies.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "meal_option_id",
            sa.Integer(),
            sa.ForeignKey("meal_options.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("guest_id", "ceremony_id", name="uq_guest_meal_ceremony"),
    )
    op.create_index("ix_guest_meal_selections_guest_id", "guest_meal_selections", ["guest_id"])

    op.create_table(
        "travel_info",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "guest_id",
            sa.Integer(),
            sa.ForeignKey("guests.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("needs_transportation", sa.Boolean(), nullable=False),
        sa.Column("transportation_type", sa.String(length=50), nullable=True),
        sa.Column("travel_mode", sa.String(length=20), nullable=True),
        sa.Column("arrival_date", sa.Date(), nullable=True),
        sa.Column("arrival_time", sa.String(length=10), nullable=True),
        sa.Column("departure_date", sa.Date(), nullable=True),
        sa.Column("departure_time", sa.String(length=10), nullable=True),
        sa.Column("flight_number", sa.String(length=50), nullable=True),
        sa.Column("flight_notes", sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "couple_messages",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("wedding_events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "guest_id",
            sa.Integer(),
            sa.ForeignKey("guests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("message", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_couple_messages_event_id", "couple_messages", ["event_id"])

    op.create_table(
        "accommodations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("wedding_events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("room_type", sa.String(length=100), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("total_rooms", sa.Integer(), nullable=False),
        sa.Column("allocated_rooms", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_accommodations_event_id", "accommodations", ["event_id"])

    op.create_table(
        "room_allocations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "accommodation_id",
            sa.Integer(),
            sa.ForeignKey("accommodations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "guest_id",
            sa.Integer(),
            sa.ForeignKey("guests.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("check_in_date", sa.Date(), nullable=True),
        sa.Column("check_out_date", sa.Date(), nullable=True),
        sa.Column("check_in_status", sa.String(length=20), nullable=False),
        sa.Column("includes_plus_one", sa.Boolean(), nullable=False),
        sa.Column("children_count", sa.Integer(), nullable=False),
        sa.Column("special_requests", sa.Text(), nullable=True),
        sa.Column("additional_guests_info", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_room_allocations_guest_id", "room_allocations", ["guest_id"])

    op.create_table(
        "email_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("provider_message_id", sa.String(length=255), nullable=True),
        sa.Column("to_address", sa.String(length=255), nullable=False),
        sa.Column("from_address", sa.String(length=255), nullable=False),
        sa.Column("subject", sa.String(length=500), nullable=False),
        sa.Column("html_body", sa.Text(), nullable=True),
        sa.Column("text_body", sa.Text(), nullable=True),
        sa.Column("email_type", sa.String(length=50), nullable=False),
        sa.Column(
            "guest_id",
            sa.Integer(),
            sa.ForeignKey("guests.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "event_id",
            sa.Integer(),
            sa.ForeignKey("wedding_events.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("error_message", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_email_logs_provider_message_id", "email_logs", ["provider_message_id"], unique=True
    )
    op.create_index("ix_email_logs_to_address", "email_logs", ["to_address"])
    op.create_index("ix_email_logs_email_type", "email_logs", ["email_type"])
    op.create_index("ix_email_logs_guest_id", "email_logs", ["guest_id"])
    op.create_index("ix_email_logs_event_id", "email_logs", ["event_id"])
    op.create_index("ix_email_logs_status", "email_logs", ["status"])


def downgrade() -> None:
    op.drop_table("email_logs")
    op.drop_table("room_allocations")
    op.drop_table("accommodations")
    op.drop_table("couple_messages")
    op.drop_table("travel_info")
    op.drop_table("guest_meal_selections")
    op.drop_table("meal_options")
    op.drop_table("guest_ceremonies")
    op.drop_table("ceremonies")
    op.drop_table("guests")
    op.drop_table("wedding_events")
    sa.Enum(name="guest_status_enum").drop(op.get_bind(), checkfirst=True)
