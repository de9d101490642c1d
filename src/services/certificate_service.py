"""
Service that manages everything related to digital certificates.
"""
from typing import Mapping, Optional

from ..models.config import Config
from ..security.certificate import Certificate
from ..security.key_normalizer import DEFAULT_WRAP_WIDTH
from .certificate_faker import CertificateFaker
from .certificate_loader import CertificateLoader
from .certificate_validator import BaseCertificateValidator, CertificateValidator


class CertificateService:
    """Facade over the faker, loader and validator."""

    def __init__(self, faker: CertificateFaker, loader: CertificateLoader,
                 validator: BaseCertificateValidator):
        self.faker = faker
        self.loader = loader
        self.validator = validator

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> 'CertificateService':
        """Wire the default collaborators."""
        loader = CertificateLoader(config.wrap_width if config else DEFAULT_WRAP_WIDTH)
        return cls(
            faker=CertificateFaker(loader, config),
            loader=loader,
            validator=CertificateValidator()
        )

    def create_fake(self, id: Optional[str] = None, name: Optional[str] = None,
                    email: Optional[str] = None) -> Certificate:
        return self.faker.create_fake(id, name, email)

    def load_from_file(self, file_path: str, password: str) -> Certificate:
        return self.loader.load_from_file(file_path, password)

    def load_from_data(self, data: bytes, password: str) -> Certificate:
        return self.loader.load_from_data(data, password)

    def load_from_key_map(self, data: Mapping[str, str]) -> Certificate:
        return self.loader.load_from_key_map(data)

    def load_from_keys(self, public_key: str, private_key: str) -> Certificate:
        return self.loader.load_from_keys(public_key, private_key)

    def validate(self, certificate: Certificate) -> None:
        self.validator.validate(certificate)
