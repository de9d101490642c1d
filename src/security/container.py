"""
PKCS#12 container helpers.
"""
import logging

from cryptography.exceptions import InternalError
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.serialization import pkcs12

from .exceptions import CertificateError, backend_errors
from .models import KeyPair


logger = logging.getLogger(__name__)


def _password_bytes(password: str):
    return password.encode() if password else None


def read_pkcs12(data: bytes, password: str) -> KeyPair:
    """
    Unpack a PKCS#12 container into PEM certificate and private key.

    Args:
        data: Raw container bytes
        password: Container password

    Returns:
        KeyPair with the certificate and a PKCS#8 private key

    Raises:
        CertificateError: If the password is wrong or the data is corrupt
    """
    try:
        private_key, cert, _ = pkcs12.load_key_and_certificates(
            data, _password_bytes(password)
        )
    except (ValueError, TypeError, InternalError) as e:
        raise CertificateError(
            "It was not possible to read the digital certificate data.", backend_errors(e)
        ) from e

    if cert is None or private_key is None:
        raise CertificateError(
            "The digital certificate data does not contain a certificate and a private key."
        )

    logger.debug("Unpacked PKCS#12 container")
    return KeyPair(
        public_key=cert.public_bytes(serialization.Encoding.PEM).decode(),
        private_key=private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption()
        ).decode()
    )


def write_pkcs12(private_key, cert, password: str) -> bytes:
    """Pack a certificate and its private key into a PKCS#12 container."""
    if password:
        encryption = serialization.BestAvailableEncryption(password.encode())
    else:
        encryption = serialization.NoEncryption()
    return pkcs12.serialize_key_and_certificates(
        name=None,
        key=private_key,
        cert=cert,
        cas=None,
        encryption_algorithm=encryption
    )
