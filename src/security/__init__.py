"""
Security package for digital certificate (electronic signature) handling.
"""
from .certificate import Certificate
from .exceptions import CertificateError, UnsupportedOperation
from .key_normalizer import KeyNormalizer
from .models import (
    ChainStage, CertificateData, DistinguishedName, KeyPair,
    PrivateKeyDetails, ValidationResult, ValidityWindow
)

__all__ = [
    'Certificate',
    'CertificateError',
    'UnsupportedOperation',
    'KeyNormalizer',
    'ChainStage',
    'CertificateData',
    'DistinguishedName',
    'KeyPair',
    'PrivateKeyDetails',
    'ValidationResult',
    'ValidityWindow'
]
