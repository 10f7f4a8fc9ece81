"""Create users, books and authors tables

Revision ID: 3f1c9a7d2e10
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2e10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, comment="User's e-mail address (lower-cased, used for login)"),
        sa.Column('hashed_password', sa.String(length=255), nullable=True, comment='Bcrypt hashed password (null for Google-only users)'),
        sa.Column('google_id', sa.String(length=255), nullable=True, comment='Google account id'),
        sa.Column('name', sa.String(length=50), nullable=False, comment='Display name'),
        sa.Column('avatar_url', sa.Text(), nullable=True, comment="URL to user's avatar image"),
        sa.Column('role', sa.String(length=20), nullable=False, comment='user or admin'),
        sa.Column('is_active', sa.Boolean(), nullable=False, comment='Whether the account is active'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='When the user registered'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='When the user profile was last updated'),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True, comment='When the user last logged in'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_google_id'), 'users', ['google_id'], unique=True)

    op.create_table('books',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False, comment='Book title'),
        sa.Column('author', sa.String(length=100), nullable=False, comment='Author name as printed on the book'),
        sa.Column('isbn', sa.String(length=20), nullable=False, comment='International Standard Book Number'),
        sa.Column('genre', sa.String(length=30), nullable=False, comment='One of the fixed Genre values'),
        sa.Column('published_date', sa.Date(), nullable=False, comment='Date of publication'),
        sa.Column('pages', sa.Integer(), nullable=False, comment='Number of pages'),
        sa.Column('description', sa.Text(), nullable=False, comment='Book description or summary'),
        sa.Column('publisher', sa.String(length=100), nullable=False, comment='Publisher name'),
        sa.Column('language', sa.String(length=100), nullable=False, comment='Language the book is written in'),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=False, comment='Book price'),
        sa.Column('in_stock', sa.Boolean(), nullable=False, comment='Derived: stock_quantity > 0'),
        sa.Column('stock_quantity', sa.Integer(), nullable=False, comment='Copies in stock'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_books_isbn'), 'books', ['isbn'], unique=True)
    op.create_index(op.f('ix_books_title'), 'books', ['title'], unique=False)
    op.create_index(op.f('ix_books_genre'), 'books', ['genre'], unique=False)
    op.create_index(op.f('ix_books_published_date'), 'books', ['published_date'], unique=False)

    op.create_table('authors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=50), nullable=False, comment="Author's first name"),
        sa.Column('last_name', sa.String(length=50), nullable=False, comment="Author's last name"),
        sa.Column('email', sa.String(length=255), nullable=False, comment='Contact e-mail (lower-cased)'),
        sa.Column('biography', sa.Text(), nullable=True, comment='Author biography'),
        sa.Column('birth_date', sa.Date(), nullable=True, comment='Date of birth'),
        sa.Column('nationality', sa.String(length=50), nullable=True, comment='Nationality'),
        sa.Column('website', sa.String(length=500), nullable=True, comment='Personal or official website URL'),
        sa.Column('is_active', sa.Boolean(), nullable=False, comment='Whether the author is currently active'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='When the author record was created'),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False, comment='When the author record was last updated'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_authors_email'), 'authors', ['email'], unique=True)
    op.create_index(op.f('ix_authors_last_name'), 'authors', ['last_name'], unique=False)
    op.create_index(op.f('ix_authors_nationality'), 'authors', ['nationality'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_authors_nationality'), table_name='authors')
    op.drop_index(op.f('ix_authors_last_name'), table_name='authors')
    op.drop_index(op.f('ix_authors_email'), table_name='authors')
    op.drop_table('authors')

    op.drop_index(op.f('ix_books_published_date'), table_name='books')
    op.drop_index(op.f('ix_books_genre'), table_name='books')
    op.drop_index(op.f('ix_books_title'), table_name='books')
    op.drop_index(op.f('ix_books_isbn'), table_name='books')
    op.drop_table('books')

    op.drop_index(op.f('ix_users_google_id'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
