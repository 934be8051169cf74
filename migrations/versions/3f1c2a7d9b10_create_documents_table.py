"""create_documents_table

Revision ID: 3f1c2a7d9b10
Revises:
Create Date: 2025-06-02 09:14:27.418305

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f1c2a7d9b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    # init_db() may already have created the table through create_all()
    from sqlalchemy import inspect
    conn = op.get_bind()
    inspector = inspect(conn)

    if 'documents' not in inspector.get_table_names():
        op.create_table(
            'documents',
            sa.Column('collection', sa.String(length=50), nullable=False),
            sa.Column('doc_id', sa.String(length=100), nullable=False),
            sa.Column('data', sa.JSON(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint('collection', 'doc_id')
        )
        op.create_index('idx_documents_collection', 'documents', ['collection'], unique=False)


def downgrade():
    op.drop_index('idx_documents_collection', table_name='documents')
    op.drop_table('documents')
