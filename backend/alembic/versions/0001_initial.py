"""clientes, projetos e contratos

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

CONTRATO_STATUS = (
    "Aguardando Geração",
    "Aguardando Revisão",
    "Enviado",
    "Ativo",
    "Cancelado",
)


def upgrade() -> None:
    op.create_table(
        "clientes",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("razao_social", sa.String(length=255), nullable=False),
        sa.Column("cnpj", sa.String(length=14), nullable=False),
        sa.Column("endereco_completo", sa.String(), nullable=True),
        sa.Column("cidade_estado", sa.String(length=120), nullable=True),
        sa.Column("assinante_nome", sa.String(length=180), nullable=True),
        sa.Column("assinante_email", sa.String(length=255), nullable=True),
        sa.Column("financeiro_nome", sa.String(length=180), nullable=True),
        sa.Column("financeiro_email", sa.String(length=255), nullable=True),
        sa.Column("financeiro_telefone", sa.String(length=32), nullable=True),
        sa.Column("asaas_customer_id", sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("cnpj", name="uq_clientes_cnpj"),
    )
    op.create_index("ix_clientes_razao_social", "clientes", ["razao_social"], unique=False)
    op.create_index("ix_clientes_created_at", "clientes", ["created_at"], unique=False)

    op.create_table(
        "projetos",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("nome_projeto", sa.String(length=180), nullable=False),
        sa.Column("descricao", sa.String(), nullable=True),
        sa.Column("template_pdf_path", sa.String(length=1024), nullable=True),
        sa.Column("template_html", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projetos_nome_projeto", "projetos", ["nome_projeto"], unique=False)
    op.create_index("ix_projetos_created_at", "projetos", ["created_at"], unique=False)

    op.create_table(
        "contratos",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cliente_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("projeto_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("valor_mensalidade", sa.Numeric(12, 2), nullable=False),
        sa.Column("valor_setup", sa.Numeric(12, 2), nullable=False),
        sa.Column("plano_nome", sa.String(length=120), nullable=False),
        sa.Column("prazo_implementacao_dias", sa.Integer(), nullable=True),
        sa.Column("forma_pagamento", sa.String(length=60), nullable=True),
        sa.Column("provedor_openai", sa.String(length=60), nullable=True),
        sa.Column("observacoes_ia", sa.String(), nullable=True),
        sa.Column("assinante_venda_nome", sa.String(length=180), nullable=True),
        sa.Column("assinante_venda_email", sa.String(length=255), nullable=True),
        sa.Column(
            "status",
            sa.Enum(*CONTRATO_STATUS, name="contrato_status", native_enum=False, length=32),
            nullable=False,
        ),
        sa.Column("url_contrato_gerado", sa.String(length=1024), nullable=True),
        sa.Column("clicksign_document_key", sa.String(length=120), nullable=True),
        sa.Column("asaas_subscription_id", sa.String(length=64), nullable=True),
        sa.Column("asaas_setup_payment_id", sa.String(length=64), nullable=True),
        sa.ForeignKeyConstraint(["cliente_id"], ["clientes.id"]),
        sa.ForeignKeyConstraint(["projeto_id"], ["projetos.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_contratos_cliente_id", "contratos", ["cliente_id"], unique=False)
    op.create_index("ix_contratos_projeto_id", "contratos", ["projeto_id"], unique=False)
    op.create_index("ix_contratos_status", "contratos", ["status"], unique=False)
    op.create_index("ix_contratos_created_at", "contratos", ["created_at"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_contratos_created_at", table_name="contratos")
    op.drop_index("ix_contratos_status", table_name="contratos")
    op.drop_index("ix_contratos_projeto_id", table_name="contratos")
    op.drop_index("ix_contratos_cliente_id", table_name="contratos")
    op.drop_table("contratos")
    op.drop_index("ix_projetos_created_at", table_name="projetos")
    op.drop_index("ix_projetos_nome_projeto", table_name="projetos")
    op.drop_table("projetos")
    op.drop_index("ix_clientes_created_at", table_name="clientes")
    op.drop_index("ix_clientes_razao_social", table_name="clientes")
    op.drop_table("clientes")
