"""Initial database schema

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create asset library, gallery and template mirror tables."""

    # Brand asset library
    op.create_table('brand_assets',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('category', sa.String(64), server_default='other', nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('storage_path', sa.String(512), nullable=False),
        sa.Column('public_url', sa.Text(), nullable=False),
        sa.Column('mime_type', sa.String(128), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('sku', sa.String(64), nullable=True),
        sa.Column('flavor', sa.String(128), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.Index('ix_brand_assets_category', 'category'),
    )

    # Saved ads
    op.create_table('generated_ads',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('ad_size', sa.String(32), nullable=False),
        sa.Column('template_id', sa.String(128), server_default='ai-generated', nullable=False),
        sa.Column('headline', sa.Text(), nullable=True),
        sa.Column('subheadline', sa.Text(), nullable=True),
        sa.Column('body_copy', sa.Text(), nullable=True),
        sa.Column('cta_text', sa.Text(), nullable=True),
        sa.Column('html', sa.Text(), nullable=False),
        sa.Column('fields', sa.JSON(), nullable=True),
        sa.Column('colors', sa.JSON(), nullable=True),
        sa.Column('flavor', sa.String(128), nullable=True),
        sa.Column('channel', sa.String(64), nullable=True),
        sa.Column('output_image_url', sa.Text(), nullable=True),
        sa.Column('output_storage_path', sa.String(512), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.Index('ix_generated_ads_created_at', 'created_at'),
    )

    # Mirror of the rendering provider's templates
    op.create_table('render_templates',
        sa.Column('id', sa.String(128), nullable=False),
        sa.Column('name', sa.String(255), server_default='Untitled', nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(64), server_default='other', nullable=False),
        sa.Column('width', sa.Integer(), server_default='1080', nullable=False),
        sa.Column('height', sa.Integer(), server_default='1080', nullable=False),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('editable_fields', sa.JSON(), nullable=True),
        sa.Column('preview_url', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.Index('ix_render_templates_category', 'category'),
        sa.Index('ix_render_templates_is_active', 'is_active'),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('render_templates')
    op.drop_table('generated_ads')
    op.drop_table('brand_assets')
