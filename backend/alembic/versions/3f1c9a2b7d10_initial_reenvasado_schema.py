"""initial reenvasado schema

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the catalog, identity and activity tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'sesiones',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_sesiones_user_id', 'sesiones', ['user_id'])

    op.create_table(
        'medicamentos',
        sa.Column('codigo_sap', sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column('nombre_medicamento', sa.String(), nullable=False),
        sa.Column('principio_activo', sa.String(), nullable=True),
    )
    op.create_index('ix_medicamentos_codigo_sap', 'medicamentos', ['codigo_sap'])
    op.create_index('ix_medicamentos_nombre_medicamento', 'medicamentos', ['nombre_medicamento'])

    op.create_table(
        'metodo_reenvasado',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('tipo_reenvasado', sa.String(), nullable=False, unique=True),
    )
    op.create_index('ix_metodo_reenvasado_id', 'metodo_reenvasado', ['id'])

    op.create_table(
        'medicamento_metodo',
        sa.Column('codigo_sap', sa.Integer(), sa.ForeignKey('medicamentos.codigo_sap', ondelete='CASCADE'), primary_key=True),
        sa.Column('metodo_id', sa.Integer(), sa.ForeignKey('metodo_reenvasado.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'actividad_reenvasado',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('fecha', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('codigo_sap', sa.Integer(), sa.ForeignKey('medicamentos.codigo_sap'), nullable=False),
        sa.Column('metodo_id', sa.Integer(), sa.ForeignKey('metodo_reenvasado.id'), nullable=False),
        sa.Column('cantidad', sa.Integer(), nullable=False),
        sa.Column('cantidad_final', sa.Integer(), nullable=False),
        sa.Column('lote_original', sa.String(), nullable=False),
        sa.Column('caducidad_original', sa.Date(), nullable=False),
        sa.Column('caducidad_reenvasado', sa.Date(), nullable=False),
        sa.Column('incidencias', sa.String(255), nullable=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.CheckConstraint('cantidad > 0', name='ck_actividad_cantidad_positiva'),
        sa.CheckConstraint('cantidad_final >= 0 AND cantidad_final <= cantidad', name='ck_actividad_cantidad_final_rango'),
        sa.CheckConstraint('caducidad_reenvasado >= caducidad_original', name='ck_actividad_caducidades'),
    )
    op.create_index('ix_actividad_reenvasado_id', 'actividad_reenvasado', ['id'])
    op.create_index('ix_actividad_reenvasado_fecha', 'actividad_reenvasado', ['fecha'])
    op.create_index('ix_actividad_reenvasado_codigo_sap', 'actividad_reenvasado', ['codigo_sap'])
    op.create_index('ix_actividad_reenvasado_user_id', 'actividad_reenvasado', ['user_id'])

    # Row-level security: each user only sees and inserts their own activity.
    # The API sets app.user_id per transaction (utils.tenancy.scope_to_user).
    if op.get_bind().dialect.name == 'postgresql':
        op.execute('ALTER TABLE actividad_reenvasado ENABLE ROW LEVEL SECURITY')
        op.execute('ALTER TABLE actividad_reenvasado FORCE ROW LEVEL SECURITY')
        op.execute(
            """
            CREATE POLICY actividad_reenvasado_owner ON actividad_reenvasado
                USING (user_id = NULLIF(current_setting('app.user_id', true), '')::integer)
                WITH CHECK (user_id = NULLIF(current_setting('app.user_id', true), '')::integer)
            """
        )


def downgrade() -> None:
    """Drop everything created in upgrade."""
    if op.get_bind().dialect.name == 'postgresql':
        op.execute('DROP POLICY IF EXISTS actividad_reenvasado_owner ON actividad_reenvasado')
    op.drop_table('actividad_reenvasado')
    op.drop_table('medicamento_metodo')
    op.drop_table('metodo_reenvasado')
    op.drop_table('medicamentos')
    op.drop_table('sesiones')
    op.drop_table('users')
