"""
===============================================================================
TARJETA CRC: application/usecases/cases/case_fields.py
===============================================================================

Responsabilidades:
  - Normalizar los campos descriptivos de un caso (alta y edición).
  - Reglas:
      * texto obligatorio: no vacío (strip)
      * texto opcional: vacío / None -> "N/A"
      * texto nullable: vacío / None -> None
      * contadores: enteros >= 0 (acepta "12" desde multipart)
      * caseDate: date | datetime | ISO 8601 -> date
  - Reportar errores por campo usando el nombre público (JSON).

Colaboradores:
  - domain.entities (catálogos de campos)
  - create_case.py / update_case.py
===============================================================================
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Tuple

from ....domain.entities import (
    COUNT_FIELDS,
    DATE_FIELDS,
    NOT_AVAILABLE,
    NULLABLE_TEXT_FIELDS,
    OPTIONAL_TEXT_FIELDS,
    REQUIRED_TEXT_FIELDS,
)

FieldErrors = List[Dict[str, Any]]

INVALID_DATE_MESSAGE = "Fecha inválida."


def parse_case_date(value: Any) -> date | None:
    """None si el valor no representa una fecha válida."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _parse_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        return None
    return value.strip()


def normalize_case_fields(
    raw: Mapping[str, Any], *, partial: bool
) -> Tuple[Dict[str, Any], FieldErrors]:
    """
    Normaliza `raw` (claves = atributos de Case).

    partial=False (alta): todos los obligatorios deben venir; los opcionales
    toman su default.
    partial=True (edición): sólo se procesan las claves presentes.
    """
    values: Dict[str, Any] = {}
    errors: FieldErrors = []

    def present(attr: str) -> bool:
        return attr in raw

    for attr, alias in REQUIRED_TEXT_FIELDS.items():
        if partial and not present(attr):
            continue
        text = _text(raw.get(attr))
        if not text:
            errors.append({"field": alias, "msg": f"El campo {alias} es obligatorio."})
        else:
            values[attr] = text

    for attr, alias in OPTIONAL_TEXT_FIELDS.items():
        if partial and not present(attr):
            continue
        value = raw.get(attr)
        if value is not None and not isinstance(value, str):
            errors.append({"field": alias, "msg": f"El campo {alias} debe ser texto."})
            continue
        values[attr] = _text(value) or NOT_AVAILABLE

    for attr, alias in NULLABLE_TEXT_FIELDS.items():
        if partial and not present(attr):
            continue
        value = raw.get(attr)
        if value is not None and not isinstance(value, str):
            errors.append({"field": alias, "msg": f"El campo {alias} debe ser texto."})
            continue
        values[attr] = _text(value) or None

    for attr, alias in COUNT_FIELDS.items():
        if partial and not present(attr):
            continue
        value = raw.get(attr)
        if value is None or value == "":
            values[attr] = 0
            continue
        parsed = _parse_count(value)
        if parsed is None:
            errors.append(
                {"field": alias, "msg": f"El campo {alias} debe ser un entero >= 0."}
            )
        else:
            values[attr] = parsed

    for attr, alias in DATE_FIELDS.items():
        if partial and not present(attr):
            continue
        parsed_date = parse_case_date(raw.get(attr))
        if parsed_date is None:
            errors.append({"field": alias, "msg": INVALID_DATE_MESSAGE})
        else:
            values[attr] = parsed_date

    if partial and present("archivo"):
        archivo = _text(raw.get("archivo"))
        if not archivo:
            errors.append({"field": "archivo", "msg": "El campo archivo es obligatorio."})
        else:
            values["archivo"] = archivo

    return values, errors


def summarize_errors(errors: FieldErrors) -> str:
    """Mensaje único para el `detail` de la respuesta."""
    if len(errors) == 1:
        return str(errors[0]["msg"])
    return "Datos del caso inválidos: " + ", ".join(str(e["field"]) for e in errors)
