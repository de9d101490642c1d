"""
Services package for the certificate toolkit.
"""

from .certificate_faker import CertificateFaker
from .certificate_loader import CertificateLoader
from .certificate_service import CertificateService
from .certificate_validator import BaseCertificateValidator, CertificateValidator
from .chain_generator import SelfSignedChainGenerator
from .config_service import ConfigService

__all__ = [
    'CertificateFaker',
    'CertificateLoader',
    'CertificateService',
    'BaseCertificateValidator',
    'CertificateValidator',
    'SelfSignedChainGenerator',
    'ConfigService'
]
