"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema completo desde cero (migración fundacional).
  - Definir tablas, constraints e índices del gabinete: users, casos, comunas.

Collaborators:
  - PostgreSQL 14+
  - Alembic (framework de migraciones)
  - infrastructure/repositories/postgres/* (usa este esquema como contrato)

Policy:
  - Migración BASELINE. Downgrade NO soportado.
  - Toda evolución futura del esquema se hace con migraciones aditivas (002+).
  - Convención de nombres:
      pk_<tabla>         - Primary keys
      uq_<tabla>_<col>   - Unique constraints
      ix_<tabla>_<col>   - Indexes
  - Las bitácoras (actuaciones / modificaciones) son arrays JSONB en la fila
    del caso; el repositorio sólo les hace append (`||`).
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _not_available(name: str) -> sa.Column:
    return sa.Column(
        name, sa.Text, nullable=False, server_default=sa.text("'N/A'")
    )


def _json_log(name: str) -> sa.Column:
    return sa.Column(
        name,
        postgresql.JSONB,
        nullable=False,
        server_default=sa.text("'[]'::jsonb"),
    )


def upgrade() -> None:
    # =========================================================
    # 1) IDENTITY (users)
    # =========================================================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.Text, nullable=False),
        # role es string (superadmin | admin | user); sin enum en DB.
        sa.Column(
            "role",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'user'"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )
    op.create_index("ix_users_created_at", "users", ["created_at"])

    # =========================================================
    # 2) CASOS
    # =========================================================
    op.create_table(
        "casos",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tipo_obra", sa.Text, nullable=False),
        sa.Column("nombre_obra", sa.Text, nullable=True),
        sa.Column("parroquia", sa.Text, nullable=False),
        sa.Column("circuito", sa.Text, nullable=False),
        sa.Column("eje", sa.Text, nullable=False),
        sa.Column("comuna", sa.Text, nullable=False),
        sa.Column("codigo_comuna", sa.Text, nullable=False),
        sa.Column("name_jc", sa.Text, nullable=False),
        sa.Column("name_ju", sa.Text, nullable=False),
        sa.Column("enlace_comunal", sa.Text, nullable=False),
        sa.Column("case_description", sa.Text, nullable=False),
        sa.Column("case_date", sa.Date, nullable=False),
        # Nombre del PDF guardado en UPLOAD_DIR (no la URL pública).
        sa.Column("archivo", sa.String(255), nullable=False),
        _not_available("ente_responsable"),
        sa.Column(
            "cantidad_consejos_comunales",
            sa.Integer,
            nullable=False,
            server_default=sa.text("0"),
        ),
        _not_available("consejo_comunal_ejecuta"),
        sa.Column(
            "cantidad_familiares",
            sa.Integer,
            nullable=False,
            server_default=sa.text("0"),
        ),
        _not_available("direccion_exacta"),
        _not_available("responsable_sala_autogobierno"),
        _not_available("jefe_calle"),
        _not_available("jefe_politico_eje"),
        _not_available("jefe_juventud_circuito_comunal"),
        sa.Column("codigo_personalizado", sa.Text, nullable=True),
        sa.Column(
            "estado",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'Cargado'"),
        ),
        sa.Column("fecha_entrega", sa.Date, nullable=True),
        _json_log("actuaciones"),
        _json_log("modificaciones"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_casos"),
        # NULLs no colisionan: varios casos pueden no tener código.
        sa.UniqueConstraint(
            "codigo_personalizado", name="uq_casos_codigo_personalizado"
        ),
        sa.CheckConstraint(
            "estado IN ('Cargado','Supervisado','En Desarrollo','Entregado')",
            name="ck_casos_estado",
        ),
        sa.CheckConstraint(
            "cantidad_consejos_comunales >= 0 AND cantidad_familiares >= 0",
            name="ck_casos_cantidades",
        ),
    )

    # Índices según queries reales (listado, stats, no contactadas, uso de adjuntos).
    op.create_index("ix_casos_created_at", "casos", ["created_at"])
    op.create_index("ix_casos_estado", "casos", ["estado"])
    op.create_index("ix_casos_parroquia", "casos", ["parroquia"])
    op.create_index("ix_casos_comuna", "casos", ["comuna"])
    op.create_index("ix_casos_archivo", "casos", ["archivo"])

    # =========================================================
    # 3) COMUNAS
    # =========================================================
    op.create_table(
        "comunas",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("nombre", sa.Text, nullable=False),
        sa.Column("codigo_circuito_comunal", sa.Text, nullable=False),
        sa.Column("parroquia", sa.Text, nullable=False),
        _json_log("consejos_comunales"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_comunas"),
    )
    op.create_index("ix_comunas_parroquia", "comunas", ["parroquia"])
    op.create_index("ix_comunas_nombre", "comunas", ["nombre"])


def downgrade() -> None:
    """Downgrade NO soportado para la migración fundacional."""
    raise NotImplementedError(
        "Baseline: downgrade no soportado por política. "
        "Para resetear la base de datos, recrearla y correr `alembic upgrade head`."
    )
