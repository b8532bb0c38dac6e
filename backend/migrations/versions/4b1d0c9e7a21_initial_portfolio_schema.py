"""initial portfolio schema

Revision ID: 4b1d0c9e7a21
Revises:
Create Date: 2025-01-12 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '4b1d0c9e7a21'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _owner(table):
    return sa.Column(
        'user_id',
        sa.Uuid(),
        sa.ForeignKey('users.id', name=f'fk_{table}_user_id_users', ondelete='CASCADE'),
        nullable=False,
    )


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('password_hash', sa.String(length=254), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=True),
        sa.Column('headline', sa.String(length=150), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('refresh_token', sa.String(length=128), nullable=True),
        sa.Column('refresh_token_expiry_time', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('email', name='uq_users_email'),
        sa.UniqueConstraint('username', name='uq_users_username'),
    )

    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_roles'),
        sa.UniqueConstraint('name', name='uq_roles_name'),
    )

    op.create_table(
        'user_roles',
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('role_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_user_roles_user_id_users', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id'], name='fk_user_roles_role_id_roles', ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id', 'role_id', name='pk_user_roles'),
    )

    op.create_table(
        'educations',
        sa.Column('id', sa.Uuid(), nullable=False),
        _owner('educations'),
        sa.Column('institution', sa.String(length=150), nullable=False),
        sa.Column('degree', sa.String(length=150), nullable=False),
        sa.Column('field_of_study', sa.String(length=150), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_educations'),
        sa.CheckConstraint('end_date IS NULL OR end_date >= start_date', name='ck_educations_end_after_start'),
    )

    op.create_table(
        'experiences',
        sa.Column('id', sa.Uuid(), nullable=False),
        _owner('experiences'),
        sa.Column('company', sa.String(length=150), nullable=False),
        sa.Column('position', sa.String(length=150), nullable=False),
        sa.Column('location', sa.String(length=150), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_experiences'),
        sa.CheckConstraint('end_date IS NULL OR end_date >= start_date', name='ck_experiences_end_after_start'),
    )

    op.create_table(
        'projects',
        sa.Column('id', sa.Uuid(), nullable=False),
        _owner('projects'),
        sa.Column('title', sa.String(length=150), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('technologies', sa.String(length=300), nullable=True),
        sa.Column('repository_url', sa.String(length=200), nullable=True),
        sa.Column('live_url', sa.String(length=200), nullable=True),
        sa.Column('image_url', sa.String(length=200), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_projects'),
    )

    op.create_table(
        'skills',
        sa.Column('id', sa.Uuid(), nullable=False),
        _owner('skills'),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_skills'),
        sa.UniqueConstraint('user_id', 'name', name='uq_skills_user_id_name'),
        sa.CheckConstraint('level BETWEEN 1 AND 5', name='ck_skills_level_range'),
    )

    op.create_table(
        'social_links',
        sa.Column('id', sa.Uuid(), nullable=False),
        _owner('social_links'),
        sa.Column('platform', sa.String(length=100), nullable=False),
        sa.Column('url', sa.String(length=200), nullable=False),
        sa.Column('icon', sa.String(length=200), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_social_links'),
    )

    op.create_table(
        'messages',
        sa.Column('id', sa.Uuid(), nullable=False),
        _owner('messages'),
        sa.Column('sender_name', sa.String(length=100), nullable=False),
        sa.Column('sender_email', sa.String(length=254), nullable=False),
        sa.Column('subject', sa.String(length=200), nullable=True),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_messages'),
    )

    for table in ('educations', 'experiences', 'projects', 'skills', 'social_links', 'messages'):
        op.create_index(f'ix_{table}_user_id', table, ['user_id'])


def downgrade():
    for table in ('messages', 'social_links', 'skills', 'projects', 'experiences', 'educations'):
        op.drop_index(f'ix_{table}_user_id', table_name=table)
        op.drop_table(table)
    op.drop_table('user_roles')
    op.drop_table('roles')
    op.drop_table('users')
