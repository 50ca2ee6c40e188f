"""Initial schema: users, profiles, subscriptions, chat, interviews, saved searches

Revision ID: 0001_initial
Revises: None
Create Date: 2026-10-18 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("name", sa.String(120)),
        *_timestamps(),
    )
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "employee_profiles",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("age", sa.Integer),
        sa.Column("birth_date", sa.DateTime),
        sa.Column("civil_status", sa.String(20)),
        sa.Column("city", sa.String(100)),
        sa.Column("province", sa.String(100)),
        sa.Column("photo_url", sa.String(1024)),
        sa.Column("skills", sa.JSON, nullable=False),
        sa.Column("experience", sa.Integer, nullable=False),
        sa.Column("headline", sa.String(200)),
        sa.Column("salary_min", sa.Integer),
        sa.Column("salary_max", sa.Integer),
        sa.Column("employment_type", sa.String(20)),
        sa.Column("availability_date", sa.DateTime),
        sa.Column("days_off", sa.JSON, nullable=False),
        sa.Column("overtime", sa.Boolean, nullable=False),
        sa.Column("holiday_work", sa.Boolean, nullable=False),
        sa.Column("visibility", sa.Boolean, nullable=False),
        sa.Column("profile_score", sa.Integer, nullable=False),
        sa.Column("kyc_status", sa.String(20), nullable=False),
        sa.Column("last_name", sa.String(50)),
        sa.Column("exact_address", sa.String(500)),
        sa.Column("phone", sa.String(20)),
        sa.Column("email", sa.String(255)),
        *_timestamps(),
    )
    op.create_index("ix_employee_profiles_user_id", "employee_profiles", ["user_id"], unique=True)
    op.create_index("ix_employee_profiles_city", "employee_profiles", ["city"])
    op.create_index("ix_employee_profiles_province", "employee_profiles", ["province"])
    op.create_index("ix_employee_profiles_visibility", "employee_profiles", ["visibility"])

    op.create_table(
        "employee_documents",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("profile_id", sa.Integer, sa.ForeignKey("employee_profiles.id"), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_url", sa.String(1024), nullable=False),
        sa.Column("storage_key", sa.String(1024)),
        sa.Column("file_size", sa.Integer, nullable=False),
        sa.Column("mime_type", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("verified_at", sa.DateTime),
        sa.Column("verified_by", sa.Integer, sa.ForeignKey("users.id")),
        sa.Column("rejection_reason", sa.Text),
        sa.Column("expires_at", sa.DateTime),
        *_timestamps(),
    )
    op.create_index("ix_employee_documents_profile_id", "employee_documents", ["profile_id"])

    op.create_table(
        "employee_references",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("profile_id", sa.Integer, sa.ForeignKey("employee_profiles.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("relationship", sa.String(100), nullable=False),
        sa.Column("company", sa.String(200)),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("duration", sa.String(100)),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )
    op.create_index("ix_employee_references_profile_id", "employee_references", ["profile_id"])

    op.create_table(
        "employer_profiles",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("company_name", sa.String(100), nullable=False),
        sa.Column("contact_person", sa.String(100), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("province", sa.String(100), nullable=False),
        sa.Column("contact_email", sa.String(255)),
        sa.Column("contact_phone", sa.String(20)),
        sa.Column("about_text", sa.String(500)),
        sa.Column("household_size", sa.String(20)),
        sa.Column("preferred_arrangement", sa.String(20)),
        sa.Column("budget_min", sa.Integer),
        sa.Column("budget_max", sa.Integer),
        sa.Column("requirements", sa.JSON, nullable=False),
        sa.Column("language_requirements", sa.JSON, nullable=False),
        sa.Column("work_schedule", sa.JSON, nullable=False),
        sa.Column("benefits_policies", sa.JSON, nullable=False),
        sa.Column("accommodation_details", sa.JSON, nullable=False),
        sa.Column("stripe_customer_id", sa.String(255)),
        *_timestamps(),
    )
    op.create_index("ix_employer_profiles_user_id", "employer_profiles", ["user_id"], unique=True)

    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("employer_id", sa.Integer, sa.ForeignKey("employer_profiles.id"), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("expires_at", sa.DateTime, nullable=False),
        sa.Column("provider", sa.String(20), nullable=False),
        sa.Column("provider_subscription_id", sa.String(255)),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_subscriptions_employer_id", "subscriptions", ["employer_id"])
    op.create_index("ix_subscriptions_status", "subscriptions", ["status"])
    op.create_index("ix_subscriptions_provider_subscription_id", "subscriptions", ["provider_subscription_id"])

    op.create_table(
        "billing_history",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("employer_id", sa.Integer, sa.ForeignKey("employer_profiles.id"), nullable=False),
        sa.Column("subscription_id", sa.Integer, sa.ForeignKey("subscriptions.id"), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("provider", sa.String(20), nullable=False),
        sa.Column("provider_payment_id", sa.String(255)),
        sa.Column("invoice_url", sa.String(1024)),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("paid_at", sa.DateTime),
        sa.Column("created_at", sa.DateTime, server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_billing_history_employer_id", "billing_history", ["employer_id"])
    op.create_index("ix_billing_history_subscription_id", "billing_history", ["subscription_id"])

    op.create_table(
        "chats",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("employer_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("employee_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("employer_id", "employee_id", name="uq_chats_pair"),
    )
    op.create_index("ix_chats_employer_id", "chats", ["employer_id"])
    op.create_index("ix_chats_employee_id", "chats", ["employee_id"])

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("chat_id", sa.Integer, sa.ForeignKey("chats.id"), nullable=False),
        sa.Column("sender_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("read_at", sa.DateTime),
        sa.Column("created_at", sa.DateTime, nullable=False),
    )
    op.create_index("ix_chat_messages_chat_id", "chat_messages", ["chat_id"])
    op.create_index("ix_chat_messages_created_at", "chat_messages", ["created_at"])

    op.create_table(
        "interviews",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("employer_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("employee_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("starts_at", sa.DateTime, nullable=False),
        sa.Column("duration_minutes", sa.Integer, nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("location", sa.String(255)),
        sa.Column("meeting_url", sa.String(1024)),
        sa.Column("notes", sa.Text),
        *_timestamps(),
    )
    op.create_index("ix_interviews_employer_id", "interviews", ["employer_id"])
    op.create_index("ix_interviews_employee_id", "interviews", ["employee_id"])
    op.create_index("ix_interviews_starts_at", "interviews", ["starts_at"])

    op.create_table(
        "saved_searches",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("params_json", sa.JSON, nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("user_id", "name", name="uq_saved_searches_user_name"),
    )
    op.create_index("ix_saved_searches_user_id", "saved_searches", ["user_id"])

    op.create_table(
        "search_filters",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("employer_id", sa.Integer, sa.ForeignKey("users.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("filters", sa.JSON, nullable=False),
        sa.Column("is_default", sa.Boolean, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_search_filters_employer_id", "search_filters", ["employer_id"])


def downgrade() -> None:
    for table in ("search_filters", "saved_searches", "interviews", "chat_messages", "chats",
                  "billing_history", "subscriptions", "employer_profiles", "employee_references",
                  "employee_documents", "employee_profiles", "users"):
        op.drop_table(table)
