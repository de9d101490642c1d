"""
Data models for certificates, key pairs and validation results.
"""
from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from cryptography import x509
from cryptography.x509.oid import NameOID


# Short attribute names used in distinguished names, in certificate order.
DN_ATTRIBUTE_OIDS = {
    'C': NameOID.COUNTRY_NAME,
    'ST': NameOID.STATE_OR_PROVINCE_NAME,
    'L': NameOID.LOCALITY_NAME,
    'O': NameOID.ORGANIZATION_NAME,
    'OU': NameOID.ORGANIZATIONAL_UNIT_NAME,
    'CN': NameOID.COMMON_NAME,
    'emailAddress': NameOID.EMAIL_ADDRESS,
    'serialNumber': NameOID.SERIAL_NUMBER,
    'title': NameOID.TITLE,
}

DN_ATTRIBUTE_NAMES = {oid: name for name, oid in DN_ATTRIBUTE_OIDS.items()}


def name_to_dict(name: x509.Name) -> Dict[str, str]:
    """Flatten an x509 Name into short attribute name -> value."""
    result = {}
    for attribute in name:
        key = DN_ATTRIBUTE_NAMES.get(attribute.oid, attribute.oid.dotted_string)
        result[key] = attribute.value
    return result


@dataclass
class KeyPair:
    """Certificate (public key) and private key in PEM text."""
    public_key: str
    private_key: str

    def as_dict(self) -> Dict[str, str]:
        return {'cert': self.public_key, 'pkey': self.private_key}


@dataclass
class DistinguishedName:
    """Identity attributes of a certificate subject or issuer."""
    C: str = ''
    ST: str = ''
    L: str = ''
    O: str = ''
    OU: str = ''
    CN: str = ''
    emailAddress: str = ''
    serialNumber: str = ''
    title: str = ''

    def to_name(self, skip=()) -> x509.Name:
        """Build an x509 Name, leaving out empty and skipped attributes."""
        attributes = []
        for dn_field in fields(self):
            value = getattr(self, dn_field.name)
            if not value or dn_field.name in skip:
                continue
            attributes.append(
                x509.NameAttribute(DN_ATTRIBUTE_OIDS[dn_field.name], value)
            )
        return x509.Name(attributes)


@dataclass
class ValidityWindow:
    """Validity period of a certificate."""
    not_before: datetime
    not_after: datetime

    def __post_init__(self):
        if self.not_before > self.not_after:
            raise ValueError("not_before must not be later than not_after")


@dataclass
class CertificateData:
    """Parsed fields of an X.509 certificate."""
    subject: Dict[str, str]
    issuer: Dict[str, str]
    serial_number: int
    validity: ValidityWindow
    extensions: x509.Extensions
    certificate: x509.Certificate


@dataclass
class PrivateKeyDetails:
    """Parameters of a private key; modulus and exponent are RSA only."""
    algorithm: str
    key_size: int
    modulus: Optional[bytes] = None
    exponent: Optional[bytes] = None


class ChainStage(Enum):
    """Stages of the self-signed chain generation pipeline."""
    ISSUER_KEY = 'issuer-key'
    ISSUER_CERT = 'issuer-cert'
    SUBJECT_KEY = 'subject-key'
    SUBJECT_CERT = 'subject-cert'
    PACKAGING = 'packaging'


@dataclass
class ValidationResult:
    """Outcome of validating a certificate against a policy."""
    is_valid: bool
    certificate_id: Optional[str] = None
    error_message: Optional[str] = None
