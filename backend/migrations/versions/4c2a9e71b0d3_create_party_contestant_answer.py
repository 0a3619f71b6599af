"""create party, contestant and answer tables

Revision ID: 4c2a9e71b0d3
Revises:
Create Date: 2026-10-17 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c2a9e71b0d3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'party',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('code', sa.String(length=8), nullable=False),
        sa.Column('host_id', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('total_questions', sa.Integer(), nullable=False),
        sa.Column('current_question', sa.Integer(), nullable=False),
        sa.Column('correct_answers', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code', name='uq_party_code'),
        sa.UniqueConstraint('host_id', name='uq_party_host_id'),
    )
    with op.batch_alter_table('party') as batch_op:
        batch_op.create_index('ix_party_code', ['code'])
        batch_op.create_index('ix_party_host_id', ['host_id'])

    op.create_table(
        'contestant',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('party_id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['party_id'], ['party.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('party_id', 'name', name='uq_contestant_party_name'),
    )
    with op.batch_alter_table('contestant') as batch_op:
        batch_op.create_index('ix_contestant_party_id', ['party_id'])

    op.create_table(
        'answer',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('party_id', sa.String(length=32), nullable=False),
        sa.Column('contestant_id', sa.String(length=32), nullable=False),
        sa.Column('question_number', sa.Integer(), nullable=False),
        sa.Column('value', sa.Float(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['party_id'], ['party.id']),
        sa.ForeignKeyConstraint(['contestant_id'], ['contestant.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('party_id', 'contestant_id', 'question_number',
                            name='uq_answer_party_contestant_question'),
    )
    with op.batch_alter_table('answer') as batch_op:
        batch_op.create_index('ix_answer_contestant_id', ['contestant_id'])
        batch_op.create_index('ix_answer_party_question', ['party_id', 'question_number'])


def downgrade():
    op.drop_table('answer')
    op.drop_table('contestant')
    op.drop_table('party')
