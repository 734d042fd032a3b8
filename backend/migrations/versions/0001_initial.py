"""Initial schema – users, cards, albums/images, folders/documents,
personal_information

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

Every owned table carries a NOT NULL user_id with ON DELETE CASCADE and an
index on it, since every query filters by owner.
"""

from alembic import op
import sqlalchemy as sa

# Alembic revision identifiers
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _owner():
    return sa.Column(
        "user_id",
        sa.Integer(),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


def _timestamp(name):
    return sa.Column(name, sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    # -- users ----------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("dob", sa.Date(), nullable=True),
        sa.Column("profile_picture", sa.String(2048), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("idx_users_email", "users", ["email"])

    # -- cards ----------------------------------------------------------
    op.create_table(
        "cards",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner(),
        sa.Column("card_holder_name", sa.String(255), nullable=False),
        # "<hex iv>:<hex ciphertext>" – never plaintext
        sa.Column("card_number", sa.Text(), nullable=False),
        sa.Column("expiry_date", sa.String(16), nullable=False),
        sa.Column("cvv", sa.Text(), nullable=False),
        sa.Column("card_type", sa.String(32), nullable=False),
        sa.Column("bank_name", sa.String(255), nullable=True),
        sa.Column("card_color", sa.String(64), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("idx_cards_user_id", "cards", ["user_id"])

    # -- albums / images ------------------------------------------------
    op.create_table(
        "albums",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner(),
        sa.Column("name", sa.String(255), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("idx_albums_user_id", "albums", ["user_id"])

    op.create_table(
        "images",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner(),
        sa.Column(
            "album_id",
            sa.Integer(),
            sa.ForeignKey("albums.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(1024), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("idx_images_user_id", "images", ["user_id"])
    op.create_index("idx_images_album_id", "images", ["album_id"])

    # -- document_folders / documents -----------------------------------
    op.create_table(
        "document_folders",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner(),
        sa.Column("name", sa.String(255), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("idx_document_folders_user_id", "document_folders", ["user_id"])

    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner(),
        sa.Column(
            "folder_id",
            sa.Integer(),
            sa.ForeignKey("document_folders.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(1024), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("idx_documents_user_id", "documents", ["user_id"])
    op.create_index("idx_documents_folder_id", "documents", ["folder_id"])

    # -- personal_information -------------------------------------------
    op.create_table(
        "personal_information",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        _owner(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(1024), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("idx_personal_information_user_id", "personal_information", ["user_id"])


def downgrade() -> None:
    op.drop_index("idx_personal_information_user_id", table_name="personal_information")
    op.drop_table("personal_information")
    op.drop_index("idx_documents_folder_id", table_name="documents")
    op.drop_index("idx_documents_user_id", table_name="documents")
    op.drop_table("documents")
    op.drop_index("idx_document_folders_user_id", table_name="document_folders")
    op.drop_table("document_folders")
    op.drop_index("idx_images_album_id", table_name="images")
    op.drop_index("idx_images_user_id", table_name="images")
    op.drop_table("images")
    op.drop_index("idx_albums_user_id", table_name="albums")
    op.drop_table("albums")
    op.drop_index("idx_cards_user_id", table_name="cards")
    op.drop_table("cards")
    op.drop_index("idx_users_email", table_name="users")
    op.drop_table("users")
