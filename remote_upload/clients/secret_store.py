"""SQLite-backed secret store holding encrypted values keyed by (service, account)."""

from __future__ import annotations

import base64
import hashlib
import logging
import sqlite3
from pathlib import Path
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


class SecretCipher:
    """Encrypt and decrypt short strings with a Fernet key derived from a passphrase."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("A secret is required to protect stored credentials.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")

    def decrypt(self, ciphertext: str) -> str:
        try:
            plaintext = self._fernet.decrypt(ciphertext.encode("utf-8"))
        except InvalidToken as exc:
            raise ValueError("Stored value cannot be decrypted with the current secret.") from exc
        return plaintext.decode("utf-8")


class SecretStore:
    """Keychain-style get/set storage persisted to a local SQLite file.

    Values are encrypted at rest. A value that no longer decrypts (for example after
    the encryption secret changed) reads as absent so callers fall back to re-consent.
    """

    def __init__(self, db_path: str, cipher: SecretCipher) -> None:
        self._db_path = Path(db_path).expanduser()
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._cipher = cipher
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS secrets (
                    service TEXT NOT NULL,
                    account TEXT NOT NULL,
                    value TEXT NOT NULL,
                    PRIMARY KEY (service, account)
                )
                """
            )

    def get(self, service: str, account: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM secrets WHERE service = ? AND account = ?",
                (service, account),
            ).fetchone()
        if not row:
            return None
        try:
            return self._cipher.decrypt(row["value"])
        except ValueError as exc:
            logger.warning("Ignoring stored secret %s/%s: %s", service, account, exc)
            return None

    def set(self, service: str, account: str, value: str) -> None:
        if not service or not account:
            raise ValueError("Both service and account are required.")

        encrypted = self._cipher.encrypt(value)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO secrets (service, account, value)
                VALUES (?, ?, ?)
                ON CONFLICT(service, account) DO UPDATE SET value = excluded.value
                """,
                (service, account, encrypted),
            )


__all__ = ["SecretCipher", "SecretStore"]
