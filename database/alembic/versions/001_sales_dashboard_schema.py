"""Sales dashboard schema: stores, categories, products, sales

Revision ID: 001_sales_dashboard_schema
Revises:
Create Date: 2026-10-19

Sales link to store / category / product through nullable foreign keys;
unlinked sales still count towards dashboard totals.
"""
from alembic import op
import sqlalchemy as sa

revision = "001_sales_dashboard_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── dimensions ────────────────────────────────────────────────────────
    op.create_table(
        "stores",
        sa.Column("id",         sa.Integer,     primary_key=True),
        sa.Column("name",       sa.String(200), nullable=False),
        sa.Column("slug",       sa.String(200), unique=True),
        sa.Column("location",   sa.String(200)),
        sa.Column("created_at", sa.DateTime,    server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime),
    )
    op.create_table(
        "categories",
        sa.Column("id",         sa.Integer,     primary_key=True),
        sa.Column("name",       sa.String(200), nullable=False),
        sa.Column("slug",       sa.String(200), unique=True),
        sa.Column("created_at", sa.DateTime,    server_default=sa.func.now(), nullable=False),
    )
    op.create_table(
        "products",
        sa.Column("id",          sa.Integer,     primary_key=True),
        sa.Column("name",        sa.String(500), nullable=False),
        sa.Column("slug",        sa.String(200), unique=True),
        sa.Column("category_id", sa.Integer,     sa.ForeignKey("categories.id", ondelete="SET NULL")),
        sa.Column("created_at",  sa.DateTime,    server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at",  sa.DateTime),
    )

    # ── sales facts ───────────────────────────────────────────────────────
    op.create_table(
        "sales",
        sa.Column("id",          sa.Integer,         primary_key=True),
        sa.Column("date",        sa.Date,            nullable=False),
        sa.Column("qty",         sa.Numeric(12, 2),  nullable=False, server_default="0"),
        sa.Column("store_id",    sa.Integer,         sa.ForeignKey("stores.id",     ondelete="SET NULL")),
        sa.Column("category_id", sa.Integer,         sa.ForeignKey("categories.id", ondelete="SET NULL")),
        sa.Column("product_id",  sa.Integer,         sa.ForeignKey("products.id",   ondelete="SET NULL")),
        sa.Column("created_at",  sa.DateTime,        server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("qty >= 0"),
    )
    op.create_index("ix_sales_date",       "sales", ["date"])
    op.create_index("ix_sales_store_date", "sales", ["store_id", "date"])


def downgrade() -> None:
    op.drop_index("ix_sales_store_date", table_name="sales")
    op.drop_index("ix_sales_date",       table_name="sales")
    op.drop_table("sales",      checkfirst=True)
    op.drop_table("products",   checkfirst=True)
    op.drop_table("categories", checkfirst=True)
    op.drop_table("stores",     checkfirst=True)
