"""almacen inicial: materiales, compras, entradas, salidas, inventario_historial

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19 09:00:00

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '20261019_01'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    # Idempotente: init_db() pudo haber creado las tablas antes
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = inspector.get_table_names()

    # ===== MATERIALES =====
    if 'materiales' not in existing_tables:
        op.create_table(
            'materiales',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('codigo', sa.String(length=50), nullable=True),
            sa.Column('nombre', sa.String(length=200), nullable=False),
            sa.Column('unidad', sa.String(length=20), nullable=True),
            sa.Column('stock_fisico', sa.Numeric(12, 4), nullable=False, server_default='0'),
            sa.Column('stock_virtual', sa.Numeric(12, 4), nullable=False, server_default='0'),
            sa.Column('stock_minimo', sa.Numeric(12, 4), nullable=False, server_default='0'),
            sa.Column('activo', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_materiales_codigo', 'materiales', ['codigo'], unique=True)

    # ===== COMPRAS =====
    if 'compras' not in existing_tables:
        op.create_table(
            'compras',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('folio', sa.String(length=30), nullable=False),
            sa.Column('material_id', sa.Integer(), nullable=False),
            sa.Column('proveedor_id', sa.Integer(), nullable=True),
            sa.Column('cantidad', sa.Numeric(12, 4), nullable=False),
            sa.Column('cantidad_recibida', sa.Numeric(12, 4), nullable=False, server_default='0'),
            sa.Column('precio_unitario', sa.Numeric(14, 2), nullable=False),
            sa.Column('total', sa.Numeric(14, 2), nullable=False),
            sa.Column('fecha', sa.Date(), nullable=False),
            sa.Column('notas', sa.Text(), nullable=True),
            sa.Column('estatus', sa.String(length=20), nullable=False, server_default='activa'),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.ForeignKeyConstraint(['material_id'], ['materiales.id']),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_compras_folio', 'compras', ['folio'], unique=True)
        op.create_index('ix_compras_material_id', 'compras', ['material_id'])
        op.create_index('ix_compras_fecha', 'compras', ['fecha'])
        op.create_index('ix_compras_estatus', 'compras', ['estatus'])

    # ===== ENTRADAS =====
    if 'entradas' not in existing_tables:
        op.create_table(
            'entradas',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('folio', sa.String(length=30), nullable=False),
            sa.Column('compra_id', sa.Integer(), nullable=False),
            sa.Column('material_id', sa.Integer(), nullable=False),
            sa.Column('cantidad', sa.Numeric(12, 4), nullable=False),
            sa.Column('fecha', sa.Date(), nullable=False),
            sa.Column('notas', sa.Text(), nullable=True),
            sa.Column('estatus', sa.String(length=20), nullable=False, server_default='activa'),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.ForeignKeyConstraint(['compra_id'], ['compras.id']),
            sa.ForeignKeyConstraint(['material_id'], ['materiales.id']),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_entradas_folio', 'entradas', ['folio'], unique=True)
        op.create_index('ix_entradas_compra_id', 'entradas', ['compra_id'])
        op.create_index('ix_entradas_material_id', 'entradas', ['material_id'])
        op.create_index('ix_entradas_fecha', 'entradas', ['fecha'])
        op.create_index('ix_entradas_estatus', 'entradas', ['estatus'])

    # ===== SALIDAS =====
    if 'salidas' not in existing_tables:
        op.create_table(
            'salidas',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('folio', sa.String(length=30), nullable=False),
            sa.Column('material_id', sa.Integer(), nullable=False),
            sa.Column('cantidad', sa.Numeric(12, 4), nullable=False),
            sa.Column('referencia', sa.String(length=200), nullable=False),
            sa.Column('fecha', sa.Date(), nullable=False),
            sa.Column('notas', sa.Text(), nullable=True),
            sa.Column('estatus', sa.String(length=20), nullable=False, server_default='activa'),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.ForeignKeyConstraint(['material_id'], ['materiales.id']),
            sa.PrimaryKeyConstraint('id'),
        )
        op.create_index('ix_salidas_folio', 'salidas', ['folio'], unique=True)
        op.create_index('ix_salidas_material_id', 'salidas', ['material_id'])
        op.create_index('ix_salidas_fecha', 'salidas', ['fecha'])
        op.create_index('ix_salidas_estatus', 'salidas', ['estatus'])

    # ===== INVENTARIO_HISTORIAL (solo INSERT) =====
    if 'inventario_historial' not in existing_tables:
        op.create_table(
            'inventario_historial',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('material_id', sa.Integer(), nullable=False),
            sa.Column('tipo', sa.String(length=30), nullable=False),
            sa.Column('referencia_id', sa.Integer(), nullable=True),
            sa.Column('cantidad', sa.Numeric(12, 4), nullable=False),
            sa.Column('stock_fisico_anterior', sa.Numeric(12, 4), nullable=False),
            sa.Column('stock_fisico_nuevo', sa.Numeric(12, 4), nullable=False),
            sa.Column('stock_virtual_anterior', sa.Numeric(12, 4), nullable=False),
            sa.Column('stock_virtual_nuevo', sa.Numeric(12, 4), nullable=False),
            sa.Column('notas', sa.String(length=500), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
            sa.ForeignKeyConstraint(['material_id'], ['materiales.id']),
            sa.PrimaryKeyConstraint('id'),
            comment='Historial de inventario - inmutable',
        )
        op.create_index('ix_inventario_historial_material_id', 'inventario_historial', ['material_id'])
        op.create_index('ix_inventario_historial_tipo', 'inventario_historial', ['tipo'])
        op.create_index('ix_inventario_historial_created_at', 'inventario_historial', ['created_at'])

def downgrade() -> None:
    op.drop_table('inventario_historial')
    op.drop_table('salidas')
    op.drop_table('entradas')
    op.drop_table('compras')
    op.drop_table('materiales')
