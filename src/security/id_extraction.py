"""
Strategies that locate the holder ID (RUN) inside a certificate.

Some issuers store the ID in the subject serialNumber attribute while the
formal layout carries it as an IA5String otherName of the Subject Alternative
Name extension. Strategies are tried in order; each returns the raw ID or None.
"""
import logging
from typing import Callable, List, Optional

from asn1crypto import core
from cryptography import x509

from .models import CertificateData


logger = logging.getLogger(__name__)

IdStrategy = Callable[[CertificateData], Optional[str]]


def id_from_subject_serial_number(data: CertificateData) -> Optional[str]:
    """Read the ID from the subject serialNumber attribute."""
    return data.subject.get('serialNumber')


def id_from_alt_name_other_name(data: CertificateData) -> Optional[str]:
    """Read the ID from the first IA5String otherName of the SAN extension."""
    try:
        san = data.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return None

    for other_name in san.value.get_values_for_type(x509.OtherName):
        try:
            value = core.load(other_name.value)
        except ValueError as e:
            logger.debug(f"Skipping undecodable otherName {other_name.type_id.dotted_string}: {e}")
            continue
        if isinstance(value, core.IA5String):
            return value.native
    return None


DEFAULT_ID_STRATEGIES: List[IdStrategy] = [
    id_from_subject_serial_number,
    id_from_alt_name_other_name,
]


def find_id(data: CertificateData, strategies: Optional[List[IdStrategy]] = None) -> Optional[str]:
    """Return the first ID found by the strategies, or None."""
    for strategy in strategies or DEFAULT_ID_STRATEGIES:
        found = strategy(data)
        if found is not None:
            return found
    return None
