"""
Loader that builds Certificate entities from files, containers and key maps.
"""
import logging
import os
from typing import Mapping

from ..security.certificate import Certificate
from ..security.container import read_pkcs12
from ..security.exceptions import CertificateError
from ..security.key_normalizer import DEFAULT_WRAP_WIDTH


class CertificateLoader:
    """Service for loading digital certificates for electronic signature."""

    def __init__(self, wrap_width: int = DEFAULT_WRAP_WIDTH):
        self.wrap_width = wrap_width
        self.logger = logging.getLogger(__name__)

    def load_from_file(self, file_path: str, password: str) -> Certificate:
        """
        Load a certificate from a PKCS#12 file.

        Args:
            file_path: Path to the .p12/.pfx file
            password: Password of the container

        Raises:
            CertificateError: If the file cannot be read or unpacked
        """
        if not os.path.isfile(file_path) or not os.access(file_path, os.R_OK):
            raise CertificateError(
                f"It was not possible to read the digital certificate file from {file_path}"
            )

        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise CertificateError(
                f"It was not possible to read the digital certificate file from {file_path}",
                [str(e)]
            ) from e

        self.logger.info(f"Loaded certificate file: {file_path}")
        return self.load_from_data(data, password)

    def load_from_data(self, data: bytes, password: str) -> Certificate:
        """Load a certificate from the raw bytes of a PKCS#12 container."""
        keys = read_pkcs12(data, password)
        return self.load_from_keys(keys.public_key, keys.private_key)

    def load_from_key_map(self, data: Mapping[str, str]) -> Certificate:
        """
        Load a certificate from a mapping of keys.

        Accepts ``publicKey`` or ``cert`` for the certificate and
        ``privateKey`` or ``pkey`` for the private key.
        """
        public_key = data.get('publicKey') or data.get('cert')
        private_key = data.get('privateKey') or data.get('pkey')

        if public_key is None:
            raise CertificateError("The public key of the certificate was not found.")

        if private_key is None:
            raise CertificateError("The private key of the certificate was not found.")

        return self.load_from_keys(public_key, private_key)

    def load_from_keys(self, public_key: str, private_key: str) -> Certificate:
        return Certificate(public_key, private_key, self.wrap_width)
