"""
Server-side Encryption Service
Текст заметок и сообщений шифруется перед записью в БД, расшифровывается при чтении
"""
import base64
from typing import Optional, List
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

NOTE_FIELDS = ['title', 'content', 'original_title']
MESSAGE_FIELDS = ['title', 'content']


class EncryptionService:
    """Сервис для шифрования/дешифрования данных"""

    def __init__(self, secret_key: str):
        """
        Инициализация с секретным ключом
        Args:
            secret_key: Секретный ключ из переменных окружения
        """
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=b'syncpad_encryption_salt_v1',
            iterations=100000,
        )
        key = base64.urlsafe_b64encode(kdf.derive(secret_key.encode()))
        self.cipher = Fernet(key)

    def encrypt(self, data: str) -> str:
        """Шифрует строку"""
        if not data:
            return data
        encrypted = self.cipher.encrypt(data.encode())
        return base64.urlsafe_b64encode(encrypted).decode()

    def decrypt(self, encrypted_data: str) -> str:
        """Расшифровывает строку"""
        if not encrypted_data:
            return encrypted_data
        try:
            decoded = base64.urlsafe_b64decode(encrypted_data.encode())
            decrypted = self.cipher.decrypt(decoded)
            return decrypted.decode()
        except (InvalidToken, ValueError):
            # Записи, сохранённые до включения шифрования
            return encrypted_data

    def encrypt_dict(self, data: dict, fields: List[str]) -> dict:
        """Шифрует указанные поля в словаре"""
        encrypted = data.copy()
        for field in fields:
            if field in encrypted and encrypted[field]:
                encrypted[field] = self.encrypt(encrypted[field])
        return encrypted

    def decrypt_dict(self, data: dict, fields: List[str]) -> dict:
        """Расшифровывает указанные поля в словаре"""
        decrypted = data.copy()
        for field in fields:
            if field in decrypted and decrypted[field]:
                decrypted[field] = self.decrypt(decrypted[field])
        return decrypted

    def encrypt_note(self, note_dict: dict) -> dict:
        """Шифрует текстовые поля заметки (пароль и токен остаются как есть)"""
        return self.encrypt_dict(note_dict, NOTE_FIELDS)

    def decrypt_note(self, note_dict: dict) -> dict:
        """Расшифровывает текстовые поля заметки"""
        return self.decrypt_dict(note_dict, NOTE_FIELDS)

    def encrypt_message(self, message_dict: dict) -> dict:
        """Шифрует текст сообщения"""
        return self.encrypt_dict(message_dict, MESSAGE_FIELDS)

    def decrypt_message(self, message_dict: dict) -> dict:
        """Расшифровывает текст сообщения"""
        return self.decrypt_dict(message_dict, MESSAGE_FIELDS)


# Singleton instance
_encryption_service: Optional[EncryptionService] = None


def init_encryption(secret_key: str):
    """Инициализация сервиса шифрования"""
    global _encryption_service
    _encryption_service = EncryptionService(secret_key)


def get_encryption() -> EncryptionService:
    """Получить сервис шифрования"""
    if _encryption_service is None:
        raise RuntimeError("Encryption not initialized. Call init_encryption() first.")
    return _encryption_service
