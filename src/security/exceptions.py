"""
Exceptions raised by the certificate toolkit.
"""
from typing import List, Optional

from cryptography.exceptions import InternalError


# OpenSSL error codes translated to short human descriptions. The code is
# appended in parentheses, so the descriptions carry no trailing period.
OPENSSL_ERROR_TRANSLATIONS = {
    '0308010C': 'Unsupported encryption algorithm or method',
    '11800071': 'MAC verification failed in PKCS12, certificate or password is incorrect',
    '0906D06C': 'Failed to load X.509 certificate',
    '0B080074': 'Invalid PEM format',
    '0A000086': 'Key length not allowed',
    '06065064': 'Private key error: incorrect password',
    '14094418': 'SSL layer error: invalid certificate or CA not known',
    '14090086': 'SSL configuration error: certificate or key problem',
    '0907B068': 'Error in reading a certificate file',
    '1403100E': 'SSL error: incompatible protocol',
}

# Backend messages that carry no OpenSSL code, mapped to the code they stand for.
BACKEND_MESSAGE_CODES = {
    'Invalid password or PKCS12 data': '11800071',
    'mac verify failure': '11800071',
}


def _known_code(error: str) -> Optional[str]:
    for code in OPENSSL_ERROR_TRANSLATIONS:
        if f'error:{code}' in error:
            return code
    for message, code in BACKEND_MESSAGE_CODES.items():
        if message in error:
            return code
    return None


def translate_openssl_errors(errors: List[str]) -> List[str]:
    """Replace known OpenSSL error codes with readable messages."""
    translated = []
    for error in errors:
        code = _known_code(error)
        if code:
            error = f'{OPENSSL_ERROR_TRANSLATIONS[code]} (Error #{code}).'
        translated.append(error)
    return translated


def backend_errors(exc: Exception) -> List[str]:
    """Collect the low-level error texts carried by a backend exception."""
    if isinstance(exc, InternalError):
        return [
            e.reason_text.decode(errors='replace') if isinstance(e.reason_text, bytes)
            else str(e.reason_text)
            for e in exc.err_code
        ] or [str(exc)]
    return [str(exc)]


class CertificateError(Exception):
    """Error raised by every certificate operation.

    Carries a human readable message and, optionally, the low-level errors
    reported by the cryptographic backend. Generator failures also record the
    pipeline stage that failed.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None,
                 stage=None):
        self.errors = translate_openssl_errors(list(errors or []))
        self.stage = stage
        self.message = message
        full_message = ' '.join([message] + self.errors).strip()
        super().__init__(full_message)

    def get_errors(self) -> List[str]:
        """Return the translated low-level errors."""
        return self.errors


class UnsupportedOperation(CertificateError):
    """The cryptographic backend lacks a capability the operation needs."""
