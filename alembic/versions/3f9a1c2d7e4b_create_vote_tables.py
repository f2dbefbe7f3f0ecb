"""create_vote_tables

Revision ID: 3f9a1c2d7e4b
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9a1c2d7e4b'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'votes',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('title', sa.String(length=100), nullable=False),
        sa.Column('admin_password_hash', sa.String(length=255), nullable=False),
        sa.Column('total_expected_voters', sa.Integer(), nullable=False),
        sa.Column('vote_type', sa.String(length=20), nullable=False),
        sa.Column('options', sa.JSON(), nullable=False),
        sa.Column('visibility_setting', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('closed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('allow_empty_votes', sa.Boolean(), nullable=False),
        sa.Column('allow_multiple_selections', sa.Boolean(), nullable=False),
        sa.Column('allow_adding_options', sa.Boolean(), nullable=False),
        sa.Column('min_characters', sa.Integer(), nullable=False),
        sa.Column('ai_summary', sa.Text(), nullable=True),
        sa.Column('ai_themes', sa.JSON(), nullable=True),
        sa.Column('ai_summarized_at', sa.DateTime(timezone=True), nullable=True),
    )

    # No unique constraint on (vote_id, voter_attendance_number): anonymous
    # free-text votes store several rows under the same sentinel voter.
    op.create_table(
        'submissions',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('vote_id', sa.String(length=32), sa.ForeignKey('votes.id'), nullable=False),
        sa.Column('voter_attendance_number', sa.String(length=32), nullable=False),
        sa.Column('submission_value', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_submissions_vote', 'submissions', ['vote_id'])
    op.create_index('idx_submissions_vote_voter', 'submissions', ['vote_id', 'voter_attendance_number'])

    op.create_table(
        'reset_requests',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('vote_id', sa.String(length=32), sa.ForeignKey('votes.id'), nullable=False),
        sa.Column('voter_attendance_number', sa.String(length=32), nullable=False),
        sa.Column('requested_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_reset_requests_vote', 'reset_requests', ['vote_id'])


def downgrade():
    op.drop_index('idx_reset_requests_vote', table_name='reset_requests')
    op.drop_table('reset_requests')
    op.drop_index('idx_submissions_vote_voter', table_name='submissions')
    op.drop_index('idx_submissions_vote', table_name='submissions')
    op.drop_table('submissions')
    op.drop_table('votes')
