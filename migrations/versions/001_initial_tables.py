"""Create plant management, usage limit and AI feedback tables

Revision ID: 001
Revises:
Create Date: 2025-06-02 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create Flor tables"""

    # 1. Rooms
    op.create_table('rooms',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
    )

    op.create_index('ix_rooms_user_id', 'rooms', ['user_id'])

    # 2. Plants
    op.create_table('plants',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('photo_url', sa.Text(), nullable=True),
        sa.Column('watering_frequency_days', sa.Integer(), nullable=False),
        sa.Column('room_id', postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column('light_requirements', sa.Text(), nullable=True),
        sa.Column('fertilizing_tips', sa.Text(), nullable=True),
        sa.Column('pruning_tips', sa.Text(), nullable=True),
        sa.Column('troubleshooting', sa.Text(), nullable=True),
        sa.Column('created_with_ai', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], ondelete='SET NULL'),
        sa.CheckConstraint(
            'watering_frequency_days >= 1 AND watering_frequency_days <= 365',
            name='ck_plants_watering_frequency_range'
        ),
    )

    op.create_index('ix_plants_user_id', 'plants', ['user_id'])
    op.create_index('ix_plants_user_id_room_id', 'plants', ['user_id', 'room_id'])

    # 3. Watering history (insert-only)
    op.create_table('watering_history',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('plant_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('watered_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['plant_id'], ['plants.id'], ondelete='CASCADE'),
    )

    op.create_index('ix_watering_history_plant_id_watered_at', 'watering_history', ['plant_id', 'watered_at'])

    # 4. Monthly usage counters
    op.create_table('usage_limits',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('month_year', sa.String(7), nullable=False),
        sa.Column('ai_generations_this_month', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'month_year', name='uq_usage_limits_user_month'),
    )

    op.create_index('ix_usage_limits_user_id', 'usage_limits', ['user_id'])

    # 5. AI feedback
    op.create_table('ai_feedback',
        sa.Column('id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('plant_id', postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column('feedback_type', sa.String(20), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        sa.Column('ai_response_snapshot', postgresql.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['plant_id'], ['plants.id'], ondelete='CASCADE'),
        sa.CheckConstraint("feedback_type IN ('thumbs_up', 'thumbs_down')", name='ck_ai_feedback_feedback_type_valid'),
    )

    op.create_index('ix_ai_feedback_user_id', 'ai_feedback', ['user_id'])
    op.create_index('ix_ai_feedback_plant_id', 'ai_feedback', ['plant_id'])


def downgrade() -> None:
    """Drop Flor tables"""
    op.drop_table('ai_feedback')
    op.drop_table('usage_limits')
    op.drop_table('watering_history')
    op.drop_table('plants')
    op.drop_table('rooms')
