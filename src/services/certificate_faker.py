"""
Creates self-signed (fake) certificates for testing.
"""
import logging
from typing import Optional

from ..models.config import Config
from ..security.certificate import Certificate
from .certificate_loader import CertificateLoader
from .chain_generator import SelfSignedChainGenerator


class CertificateFaker:
    """Service producing fake certificates through the chain generator."""

    def __init__(self, loader: CertificateLoader, config: Optional[Config] = None):
        self.loader = loader
        self.config = config or Config()
        self.logger = logging.getLogger(__name__)

    def create_generator(self, id: Optional[str] = None, name: Optional[str] = None,
                         email: Optional[str] = None,
                         password: Optional[str] = None) -> SelfSignedChainGenerator:
        """Build a generator configured for the given holder."""
        generator = SelfSignedChainGenerator(key_size=self.config.key_size)
        generator.set_subject(
            serialNumber=self.config.fake_id if id is None else id,
            CN=self.config.fake_name if name is None else name,
            emailAddress=self.config.fake_email if email is None else email
        )
        generator.set_validity(self.config.validity_days)
        generator.set_password(self.config.default_password if password is None else password)
        generator.set_id_in_alt_name(self.config.id_in_alt_name)
        return generator

    def create_fake(self, id: Optional[str] = None, name: Optional[str] = None,
                    email: Optional[str] = None,
                    password: Optional[str] = None) -> Certificate:
        """
        Create a self-signed certificate for testing.

        Args:
            id: Holder ID (RUN)
            name: Holder name
            email: Holder email
            password: Password of the intermediate container

        Returns:
            Certificate signed by a throwaway test CA
        """
        generator = self.create_generator(id, name, email, password)
        certificate = self.loader.load_from_key_map(generator.to_key_map())
        self.logger.info(f"Created fake certificate for {generator.subject.serialNumber}")
        return certificate
