"""create shoutout tables

Revision ID: e1a2b3c4d5f6
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'e1a2b3c4d5f6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('actor', sa.String(length=20), nullable=False),
        sa.Column('action', sa.String(length=80), nullable=False),
        sa.Column('entity', sa.String(length=80), nullable=True),
        sa.Column('entity_id', sa.String(length=80), nullable=True),
        sa.Column('ip', sa.String(length=64), nullable=True),
        sa.Column('user_agent', sa.String(length=255), nullable=True),
        sa.Column('metadata_json', sa.Text(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('audit_logs', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_audit_logs_timestamp'), ['timestamp'], unique=False)

    op.create_table(
        'shoutout_availability',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('story_id', sa.String(length=64), nullable=False),
        sa.Column('slot_date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('story_id', 'slot_date', name='uq_availability_story_date')
    )
    with op.batch_alter_table('shoutout_availability', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_shoutout_availability_story_id'), ['story_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_shoutout_availability_slot_date'), ['slot_date'], unique=False)

    op.create_table(
        'shoutout_bookings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('story_id', sa.String(length=64), nullable=False),
        sa.Column('slot_date', sa.Date(), nullable=False),
        sa.Column('author_name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('story_link', sa.String(length=500), nullable=False),
        sa.Column('shoutout_code', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ['story_id', 'slot_date'],
            ['shoutout_availability.story_id', 'shoutout_availability.slot_date'],
            name='fk_booking_open_slot'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('story_id', 'slot_date', name='uq_booking_story_date_once')
    )
    with op.batch_alter_table('shoutout_bookings', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_shoutout_bookings_story_id'), ['story_id'], unique=False)
        batch_op.create_index(batch_op.f('ix_shoutout_bookings_slot_date'), ['slot_date'], unique=False)

    op.create_table(
        'shoutout_codes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('label', sa.String(length=120), nullable=False),
        sa.Column('code', sa.Text(), nullable=False),
        sa.Column('story_id', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('shoutout_codes', schema=None) as batch_op:
        batch_op.create_index(batch_op.f('ix_shoutout_codes_story_id'), ['story_id'], unique=False)


def downgrade():
    with op.batch_alter_table('shoutout_codes', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_shoutout_codes_story_id'))
    op.drop_table('shoutout_codes')

    with op.batch_alter_table('shoutout_bookings', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_shoutout_bookings_slot_date'))
        batch_op.drop_index(batch_op.f('ix_shoutout_bookings_story_id'))
    op.drop_table('shoutout_bookings')

    with op.batch_alter_table('shoutout_availability', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_shoutout_availability_slot_date'))
        batch_op.drop_index(batch_op.f('ix_shoutout_availability_story_id'))
    op.drop_table('shoutout_availability')

    with op.batch_alter_table('audit_logs', schema=None) as batch_op:
        batch_op.drop_index(batch_op.f('ix_audit_logs_timestamp'))
    op.drop_table('audit_logs')
