"""
Validation policies for digital certificates.
"""
import logging
from abc import ABC, abstractmethod

from ..security.certificate import Certificate
from ..security.exceptions import CertificateError
from ..security.models import ValidationResult


class BaseCertificateValidator(ABC):
    """Contract for certificate validation policies."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    @abstractmethod
    def validate(self, certificate: Certificate) -> None:
        """
        Validate the certificate against the policy.

        Raises:
            CertificateError: If any rule of the policy is not met
        """

    def check(self, certificate: Certificate) -> ValidationResult:
        """Validate the certificate without raising."""
        try:
            self.validate(certificate)
        except CertificateError as e:
            self.logger.warning(f"Certificate validation failed: {e}")
            return ValidationResult(is_valid=False, error_message=str(e))

        return ValidationResult(is_valid=True, certificate_id=certificate.get_id())


class CertificateValidator(BaseCertificateValidator):
    """Checks that a certificate can be used for electronic invoicing in Chile.

    The rules follow the requirements of the tax authority (SII) for the RUN
    of the holder. Certificates for other purposes need their own policy
    implementing BaseCertificateValidator.
    """

    def validate(self, certificate: Certificate) -> None:
        holder_id = certificate.get_id(False)

        # RUN must be "<number>-<check digit>"
        parts = holder_id.split('-')
        if len(parts) < 2:
            raise CertificateError(
                f'The ID (RUN) {holder_id} of the certificate is not valid, '
                f'it must include "-" (dash).'
            )

        if parts[1] == 'k':
            raise CertificateError(
                f'The RUN {holder_id} associated with the certificate is not valid, '
                f'it ends with "k" (lowercase). It is recommended to acquire a new '
                f'certificate and when purchasing it, verify that the "K" is uppercase. '
                f'The provider of the certificate with the problem is '
                f'{certificate.get_issuer()}.'
            )

        if not certificate.is_active():
            raise CertificateError(
                f'The certificate expired on {certificate.get_to()}, a valid '
                f'certificate must be used. If you do not have one, acquire it '
                f'from a provider authorized by the SII.'
            )

        self.logger.debug(f"Certificate {holder_id} passed validation")
