"""Create itineraries and routes tables.

Revision ID: 001_create_itineraries_and_routes
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '001_create_itineraries_and_routes'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


itinerary_status = sa.Enum('DRAFT', 'PLANNED', 'ACTIVE', 'COMPLETED', 'CANCELLED', name='itinerarystatus')
route_type = sa.Enum('SHORTEST', 'RECOMMENDED', 'SCENIC', name='routetype')


def upgrade() -> None:
    """Create itineraries and routes tables."""
    op.create_table(
        'itineraries',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('trip_name', sa.String(), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=True),
        sa.Column('end_date', sa.DateTime(), nullable=True),
        sa.Column('start_location', postgresql.JSONB(), nullable=True),
        sa.Column('end_location', postgresql.JSONB(), nullable=True),
        sa.Column('destinations', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('preferences', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('day_plans', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('status', itinerary_status, nullable=False, server_default='DRAFT'),
        sa.Column('selected_route_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('total_estimated_cost', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('booking_ids', postgresql.JSONB(), nullable=True),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_itineraries_user_id', 'itineraries', ['user_id'])
    op.create_index('ix_itineraries_start_date', 'itineraries', ['start_date'])
    op.create_index('ix_itineraries_status', 'itineraries', ['status'])
    op.create_index('ix_itineraries_user_id_created_at', 'itineraries', ['user_id', 'created_at'])

    op.create_table(
        'routes',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('itinerary_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('itineraries.id', ondelete='CASCADE'), nullable=False),
        sa.Column('route_type', route_type, nullable=False),
        sa.Column('total_distance', sa.Integer(), nullable=False),
        sa.Column('total_duration', sa.Integer(), nullable=False),
        sa.Column('waypoints', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('segments', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('overview', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('attractions', postgresql.JSONB(), nullable=False, server_default='[]'),
        sa.Column('estimated_costs', postgresql.JSONB(), nullable=False, server_default='{}'),
        sa.Column('score', sa.Float(), nullable=False, server_default='0'),
        sa.Column('calculated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('google_maps_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_routes_itinerary_id', 'routes', ['itinerary_id'])
    op.create_index('ix_routes_score', 'routes', ['score'])
    op.create_index('ix_routes_itinerary_id_route_type', 'routes', ['itinerary_id', 'route_type'])


def downgrade() -> None:
    """Drop routes and itineraries tables."""
    op.drop_index('ix_routes_itinerary_id_route_type', table_name='routes')
    op.drop_index('ix_routes_score', table_name='routes')
    op.drop_index('ix_routes_itinerary_id', table_name='routes')
    op.drop_table('routes')

    op.drop_index('ix_itineraries_user_id_created_at', table_name='itineraries')
    op.drop_index('ix_itineraries_status', table_name='itineraries')
    op.drop_index('ix_itineraries_start_date', table_name='itineraries')
    op.drop_index('ix_itineraries_user_id', table_name='itineraries')
    op.drop_table('itineraries')

    route_type.drop(op.get_bind(), checkfirst=True)
    itinerary_status.drop(op.get_bind(), checkfirst=True)
