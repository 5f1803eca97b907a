"""
===============================================================================
TARJETA CRC: identity/passwords.py
===============================================================================

Módulo:
    Adaptador de hashing de contraseñas + comparación de secretos operativos

Responsabilidades:
    - Hashear contraseñas con Argon2 (salt aleatorio por llamada, costo adaptativo).
    - Verificar contraseñas sin filtrar timing (verify de argon2).
    - Comparar secretos operativos en tiempo constante (hmac.compare_digest).

Colaboradores:
    - argon2.PasswordHasher
    - application/usecases/users (registro / login)
    - application/usecases/cases (entrega / borrado con secreto)
===============================================================================
"""

from __future__ import annotations

import hmac

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

_password_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hashea un password usando Argon2id."""
    return _password_hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verifica password vs hash almacenado (hash corrupto => False)."""
    try:
        return _password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def secrets_match(supplied: str | None, expected: str | None) -> bool:
    """
    Compara un secreto operativo en tiempo constante.

    Un secreto esperado vacío nunca matchea: si el deploy no configuró el
    token, la operación queda cerrada.
    """
    if not expected:
        return False
    return hmac.compare_digest(
        (supplied or "").encode("utf-8"), expected.encode("utf-8")
    )
