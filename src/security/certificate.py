"""
Digital certificate (electronic signature) entity.
"""
import base64
import logging
from datetime import date, datetime
from typing import Dict, Optional, Union

from cryptography import x509
from cryptography.exceptions import InternalError, UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .container import write_pkcs12
from .exceptions import CertificateError, backend_errors
from .id_extraction import find_id
from .key_normalizer import DEFAULT_WRAP_WIDTH, KeyNormalizer
from .models import (
    CertificateData, KeyPair, PrivateKeyDetails, ValidityWindow, name_to_dict
)


DATETIME_FORMAT = '%Y-%m-%dT%H:%M:%S'
END_OF_DAY = 'T23:59:59'

DateLike = Union[str, date, datetime]


def _to_local_string(value: DateLike) -> str:
    """Render a date-like value as a local ``YYYY-MM-DDTHH:MM:SS`` string.

    Strings are returned as given and plain dates keep their date-only form.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.strftime(DATETIME_FORMAT)
    if isinstance(value, date):
        return value.isoformat()
    return value


def _days_between(start: str, end: str) -> int:
    """Whole days from start to end, negative when end is earlier."""
    delta = datetime.fromisoformat(end) - datetime.fromisoformat(start)
    days = abs(delta).days
    return days if delta.total_seconds() >= 0 else -days


class Certificate:
    """Certificate and private key pair with lazily derived metadata."""

    def __init__(self, public_key: str, private_key: str,
                 wrap_width: int = DEFAULT_WRAP_WIDTH):
        """
        Initialize the certificate from its key material.

        Args:
            public_key: Certificate in PEM format or its bare base64 body
            private_key: PKCS#8 private key in PEM format or its bare base64 body
            wrap_width: Line width for framed keys and RSA parameters
        """
        self.wrap_width = wrap_width
        self._keys = KeyPair(
            public_key=KeyNormalizer.normalize_public_key(public_key, wrap_width),
            private_key=KeyNormalizer.normalize_private_key(private_key, wrap_width)
        )
        self._data: Optional[CertificateData] = None
        self._private_key_details: Optional[PrivateKeyDetails] = None
        self.logger = logging.getLogger(__name__)

    def get_keys(self, clean: bool = False) -> Dict[str, str]:
        """Get the certificate and private key as ``{'cert', 'pkey'}``."""
        return {
            'cert': self.get_public_key(clean),
            'pkey': self.get_private_key(clean),
        }

    def get_public_key(self, clean: bool = False) -> str:
        if clean:
            return KeyNormalizer.strip_public_key(self._keys.public_key)
        return self._keys.public_key

    def get_certificate(self, clean: bool = False) -> str:
        return self.get_public_key(clean)

    def get_private_key(self, clean: bool = False) -> str:
        if clean:
            return KeyNormalizer.strip_private_key(self._keys.private_key)
        return self._keys.private_key

    def get_data(self) -> CertificateData:
        """
        Get the parsed X.509 data, parsing the certificate on first use.

        Raises:
            CertificateError: If the public key is not a valid certificate
        """
        if self._data is None:
            try:
                cert = x509.load_pem_x509_certificate(self._keys.public_key.encode())
            except (ValueError, InternalError) as e:
                raise CertificateError(
                    "It was not possible to parse the X.509 certificate.", backend_errors(e)
                ) from e

            self._data = CertificateData(
                subject=name_to_dict(cert.subject),
                issuer=name_to_dict(cert.issuer),
                serial_number=cert.serial_number,
                validity=ValidityWindow(
                    not_before=cert.not_valid_before_utc,
                    not_after=cert.not_valid_after_utc
                ),
                extensions=cert.extensions,
                certificate=cert
            )
            self.logger.debug(f"Parsed certificate with serial {cert.serial_number}")

        return self._data

    def _load_private_key(self):
        try:
            return serialization.load_pem_private_key(
                self._keys.private_key.encode(), password=None
            )
        except (ValueError, TypeError, UnsupportedAlgorithm, InternalError) as e:
            raise CertificateError(
                "It was not possible to load the private key.", backend_errors(e)
            ) from e

    def get_private_key_details(self) -> PrivateKeyDetails:
        """Get the private key parameters, loading the key on first use."""
        if self._private_key_details is None:
            private_key = self._load_private_key()
            if isinstance(private_key, rsa.RSAPrivateKey):
                numbers = private_key.private_numbers().public_numbers
                self._private_key_details = PrivateKeyDetails(
                    algorithm='RSA',
                    key_size=private_key.key_size,
                    modulus=numbers.n.to_bytes((numbers.n.bit_length() + 7) // 8, 'big'),
                    exponent=numbers.e.to_bytes((numbers.e.bit_length() + 7) // 8, 'big')
                )
            else:
                self._private_key_details = PrivateKeyDetails(
                    algorithm=type(private_key).__name__,
                    key_size=getattr(private_key, 'key_size', 0)
                )

        return self._private_key_details

    def get_pkcs12(self, password: str) -> bytes:
        """
        Export the certificate and private key as a PKCS#12 container.

        Args:
            password: Password protecting the container

        Raises:
            CertificateError: If the container cannot be built
        """
        cert = self.get_data().certificate
        private_key = self._load_private_key()
        try:
            return write_pkcs12(private_key, cert, password)
        except (ValueError, TypeError, InternalError) as e:
            raise CertificateError(
                "It was not possible to export the certificate as PKCS#12.", backend_errors(e)
            ) from e

    def get_id(self, force_upper: bool = True) -> str:
        """
        Get the ID (RUN) of the certificate holder.

        The subject serialNumber is used when present, otherwise the
        IA5String otherName of the Subject Alternative Name extension.

        Args:
            force_upper: Upper-case the ID (check digit "k" becomes "K")

        Raises:
            CertificateError: If no ID is present in the certificate
        """
        found = find_id(self.get_data())
        if found is None:
            raise CertificateError(
                "Cannot get the ID of the digital certificate (electronic signature). "
                "It is recommended to verify the format and password of the certificate."
            )

        holder_id = found.strip().lstrip('0')
        return holder_id.upper() if force_upper else holder_id

    def _subject_field(self, key: str, label: str) -> str:
        value = self.get_data().subject.get(key)
        if not value:
            raise CertificateError(
                f"Cannot get the {label} of the digital certificate (electronic signature)."
            )
        return value

    def get_name(self) -> str:
        return self._subject_field('CN', 'name')

    def get_email(self) -> str:
        return self._subject_field('emailAddress', 'email')

    def get_issuer(self) -> str:
        """Get the common name of the certificate issuer."""
        issuer = self.get_data().issuer.get('CN')
        if not issuer:
            raise CertificateError("Cannot get the issuer of the digital certificate.")
        return issuer

    def get_from(self) -> str:
        """Start of validity as a local ``YYYY-MM-DDTHH:MM:SS`` string."""
        return _to_local_string(self.get_data().validity.not_before)

    def get_to(self) -> str:
        """End of validity as a local ``YYYY-MM-DDTHH:MM:SS`` string."""
        return _to_local_string(self.get_data().validity.not_after)

    def get_total_days(self) -> int:
        return _days_between(self.get_from(), self.get_to())

    def get_expiration_days(self, from_: Optional[DateLike] = None) -> int:
        """
        Days left until the certificate expires.

        Args:
            from_: Reference moment, defaults to now

        Returns:
            Whole days until the end of validity, negative once expired
        """
        if from_ is None:
            from_ = datetime.now()
        return _days_between(_to_local_string(from_), self.get_to())

    def is_active(self, when: Optional[DateLike] = None) -> bool:
        """
        Check whether the certificate is valid at the given moment.

        A date without time of day is checked at the end of that day.
        """
        if when is None:
            when = date.today()
        when = _to_local_string(when)
        if len(when) <= 10:
            when += END_OF_DAY

        return self.get_from() <= when <= self.get_to()

    def _rsa_parameter(self, name: str, wrap_width: Optional[int]) -> str:
        value = getattr(self.get_private_key_details(), name)
        if value is None:
            raise CertificateError(f"Cannot get the {name} of the private key.")
        encoded = base64.b64encode(value).decode()
        return '\n'.join(KeyNormalizer.wrap(encoded, wrap_width or self.wrap_width))

    def get_modulus(self, wrap_width: Optional[int] = None) -> str:
        return self._rsa_parameter('modulus', wrap_width)

    def get_exponent(self, wrap_width: Optional[int] = None) -> str:
        return self._rsa_parameter('exponent', wrap_width)

    def __repr__(self):
        if self._data is None:
            return "Certificate(<not parsed>)"
        return f"Certificate(subject={self._data.subject.get('CN')!r})"
