"""Migração inicial: tabela chave-valor do carrinho."""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        "kv_entries",
        sa.Column("key", sa.String(128), primary_key=True),
        sa.Column("value", sa.LargeBinary(), nullable=False),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=False)),
    )

def downgrade() -> None:
    op.drop_table("kv_entries")
