"""
Self-signed two-tier certificate chain generator for test fixtures.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Dict

from asn1crypto import core
from cryptography import x509
from cryptography.exceptions import InternalError, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa

from ..security.container import read_pkcs12, write_pkcs12
from ..security.exceptions import CertificateError, backend_errors
from ..security.models import ChainStage, DistinguishedName


DEFAULT_VALIDITY_DAYS = 365
DEFAULT_PASSWORD = 'i_love_signatures'
DEFAULT_KEY_SIZE = 2048

# Serial numbers of the CA and the leaf; they must differ.
ISSUER_SERIAL = 666
SUBJECT_SERIAL = 69

# otherName type used by the tax authority to carry the RUN in the SAN.
RUN_OTHER_NAME_OID = x509.ObjectIdentifier('1.3.6.1.4.1.8321.1')

DEFAULT_SUBJECT = DistinguishedName(
    C='CL',
    ST='Region Metropolitana',
    L='Santiago',
    O='Fixture Robots Ltda',
    OU='Quality Assurance',
    CN='Tester Bot',
    emailAddress='tester.bot@example.com',
    serialNumber='11222333-9',
    title='Bot'
)

DEFAULT_ISSUER = DistinguishedName(
    C='CL',
    ST='Region Metropolitana',
    L='Santiago',
    O='Fixture Certificates',
    OU='Technology',
    CN='Fixture Test Certificate Authority',
    emailAddress='fake-certificates@example.com',
    serialNumber='76192083-9'
)

STAGE_MESSAGES = {
    ChainStage.ISSUER_KEY: "It was not possible to generate the private key of the issuer of the certificate.",
    ChainStage.ISSUER_CERT: "It was not possible to generate the issuer certificate (CA).",
    ChainStage.SUBJECT_KEY: "It was not possible to generate the private key of the certificate.",
    ChainStage.SUBJECT_CERT: "It was not possible to generate the user certificate.",
    ChainStage.PACKAGING: "It was not possible to package the certificate as PKCS#12.",
}


@dataclass(frozen=True)
class ChainConfig:
    """Snapshot of the generator settings used for one generation run."""
    subject: DistinguishedName
    issuer: DistinguishedName
    validity_days: int = DEFAULT_VALIDITY_DAYS
    password: str = DEFAULT_PASSWORD
    key_size: int = DEFAULT_KEY_SIZE
    id_in_alt_name: bool = False


class SelfSignedChainGenerator:
    """Builds a CA certificate and a leaf signed by it, entirely in memory.

    Only the leaf certificate and its private key leave the generator; the
    CA key exists just long enough to sign the leaf.
    """

    def __init__(self, key_size: int = DEFAULT_KEY_SIZE):
        self.logger = logging.getLogger(__name__)
        self.key_size = key_size
        self.set_subject()
        self.set_issuer()
        self.set_validity()
        self.set_password()
        self.set_id_in_alt_name(False)

    def set_subject(self, C: str = DEFAULT_SUBJECT.C, ST: str = DEFAULT_SUBJECT.ST,
                    L: str = DEFAULT_SUBJECT.L, O: str = DEFAULT_SUBJECT.O,
                    OU: str = DEFAULT_SUBJECT.OU, CN: str = DEFAULT_SUBJECT.CN,
                    emailAddress: str = DEFAULT_SUBJECT.emailAddress,
                    serialNumber: str = DEFAULT_SUBJECT.serialNumber,
                    title: str = DEFAULT_SUBJECT.title) -> 'SelfSignedChainGenerator':
        """
        Configure the subject (leaf) distinguished name.

        Raises:
            CertificateError: If CN, emailAddress or serialNumber is empty
        """
        if not CN or not emailAddress or not serialNumber:
            raise CertificateError("The CN, emailAddress and serialNumber are required.")

        self.subject = DistinguishedName(
            C=C, ST=ST, L=L, O=O, OU=OU, CN=CN,
            emailAddress=emailAddress, serialNumber=serialNumber, title=title
        )
        return self

    def set_issuer(self, C: str = DEFAULT_ISSUER.C, ST: str = DEFAULT_ISSUER.ST,
                   L: str = DEFAULT_ISSUER.L, O: str = DEFAULT_ISSUER.O,
                   OU: str = DEFAULT_ISSUER.OU, CN: str = DEFAULT_ISSUER.CN,
                   emailAddress: str = DEFAULT_ISSUER.emailAddress,
                   serialNumber: str = DEFAULT_ISSUER.serialNumber) -> 'SelfSignedChainGenerator':
        """Configure the issuer (CA) distinguished name."""
        self.issuer = DistinguishedName(
            C=C, ST=ST, L=L, O=O, OU=OU, CN=CN,
            emailAddress=emailAddress, serialNumber=serialNumber.upper()
        )
        return self

    def set_validity(self, days: int = DEFAULT_VALIDITY_DAYS) -> 'SelfSignedChainGenerator':
        """Set how many days, from now, both certificates are valid."""
        if not isinstance(days, int) or days < 1:
            raise CertificateError("The validity must be a positive number of days.")
        self.validity_days = days
        return self

    def set_password(self, password: str = DEFAULT_PASSWORD) -> 'SelfSignedChainGenerator':
        """Set the password protecting the generated container."""
        self.password = password
        return self

    def set_id_in_alt_name(self, enabled: bool = True) -> 'SelfSignedChainGenerator':
        """Carry the subject ID in a SAN otherName instead of the DN serialNumber."""
        self.id_in_alt_name = enabled
        return self

    def snapshot(self) -> ChainConfig:
        return ChainConfig(
            subject=replace(self.subject),
            issuer=replace(self.issuer),
            validity_days=self.validity_days,
            password=self.password,
            key_size=self.key_size,
            id_in_alt_name=self.id_in_alt_name
        )

    @contextmanager
    def _stage(self, stage: ChainStage):
        """Turn a failure inside a pipeline stage into a named CertificateError."""
        try:
            yield
        except (ValueError, TypeError, UnsupportedAlgorithm, InternalError) as e:
            self.logger.error(
                f"Certificate chain generation failed at stage {stage.value}: {e}",
                extra={'stage': stage.value}
            )
            raise CertificateError(
                f"{STAGE_MESSAGES[stage]} [stage: {stage.value}]", backend_errors(e), stage=stage
            ) from e

    def _generate_key(self, config: ChainConfig) -> rsa.RSAPrivateKey:
        return rsa.generate_private_key(public_exponent=65537, key_size=config.key_size)

    def _build_csr(self, name: x509.Name, private_key, alt_id: str = None) -> x509.CertificateSigningRequest:
        builder = x509.CertificateSigningRequestBuilder().subject_name(name)
        if alt_id:
            builder = builder.add_extension(
                x509.SubjectAlternativeName([
                    x509.OtherName(RUN_OTHER_NAME_OID, core.IA5String(alt_id).dump())
                ]),
                critical=False
            )
        return builder.sign(private_key, hashes.SHA256())

    def _sign_csr(self, csr: x509.CertificateSigningRequest, issuer_name: x509.Name,
                  issuer_key, serial: int, days: int, is_ca: bool) -> x509.Certificate:
        if not csr.is_signature_valid:
            raise ValueError("CSR signature is not valid")

        now = datetime.now(timezone.utc)
        builder = x509.CertificateBuilder().subject_name(
            csr.subject
        ).issuer_name(
            issuer_name
        ).public_key(
            csr.public_key()
        ).serial_number(
            serial
        ).not_valid_before(
            now
        ).not_valid_after(
            now + timedelta(days=days)
        ).add_extension(
            x509.BasicConstraints(ca=is_ca, path_length=None),
            critical=True,
        )
        for extension in csr.extensions:
            builder = builder.add_extension(extension.value, critical=extension.critical)

        return builder.sign(issuer_key, hashes.SHA256())

    def to_container(self) -> bytes:
        """
        Generate the chain and package the leaf as a PKCS#12 container.

        Returns:
            Container bytes protected with the configured password

        Raises:
            CertificateError: With ``stage`` set to the failed ChainStage
        """
        return self._generate(self.snapshot())

    def to_key_map(self) -> Dict[str, str]:
        """Generate the chain and return the leaf as ``{'cert', 'pkey'}`` PEM."""
        config = self.snapshot()
        data = self._generate(config)
        return read_pkcs12(data, config.password).as_dict()

    def _generate(self, config: ChainConfig) -> bytes:
        with self._stage(ChainStage.ISSUER_KEY):
            issuer_key = self._generate_key(config)

        with self._stage(ChainStage.ISSUER_CERT):
            issuer_name = config.issuer.to_name()
            issuer_csr = self._build_csr(issuer_name, issuer_key)
            issuer_cert = self._sign_csr(
                issuer_csr, issuer_name, issuer_key,
                ISSUER_SERIAL, config.validity_days, is_ca=True
            )

        with self._stage(ChainStage.SUBJECT_KEY):
            subject_key = self._generate_key(config)

        with self._stage(ChainStage.SUBJECT_CERT):
            if config.id_in_alt_name:
                subject_name = config.subject.to_name(skip=('serialNumber',))
                alt_id = config.subject.serialNumber
            else:
                subject_name = config.subject.to_name()
                alt_id = None
            subject_csr = self._build_csr(subject_name, subject_key, alt_id)
            subject_cert = self._sign_csr(
                subject_csr, issuer_cert.subject, issuer_key,
                SUBJECT_SERIAL, config.validity_days, is_ca=False
            )

        del issuer_key

        with self._stage(ChainStage.PACKAGING):
            data = write_pkcs12(subject_key, subject_cert, config.password)

        self.logger.info(
            f"Generated self-signed certificate for {config.subject.CN} "
            f"valid for {config.validity_days} days"
        )
        return data
