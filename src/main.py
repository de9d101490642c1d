"""
Command line entry point for the certificate toolkit.
Creates fake certificates for testing, inspects and validates PKCS#12 files.
"""

import sys
import logging
from typing import Optional

from .models.config import Config
from .security.exceptions import CertificateError
from .services.certificate_service import CertificateService
from .services.config_service import ConfigService
from .services.logging_service import LoggingService


class CertificateToolApplication:
    """Wires configuration, logging and the certificate service."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the application.

        Args:
            config_path: Path to configuration file (optional)
        """
        self.config_path = config_path
        self.config: Optional[Config] = None
        self.logging_service = None
        self.certificate_service = None
        self.logger = logging.getLogger(__name__)

    def initialize(self) -> bool:
        """Load configuration and set up services."""
        try:
            if self.config_path:
                self.config = ConfigService().load_config(self.config_path)
            else:
                self.config = Config()
        except (FileNotFoundError, ValueError) as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return False

        self.logging_service = LoggingService(self.config)
        self.certificate_service = CertificateService.from_config(self.config)
        return True

    def create_fake(self, output_path: str, id: Optional[str] = None,
                    name: Optional[str] = None, email: Optional[str] = None,
                    password: Optional[str] = None, days: Optional[int] = None) -> str:
        """Write a fake PKCS#12 certificate and return the holder ID."""
        generator = self.certificate_service.faker.create_generator(id, name, email, password)
        if days is not None:
            generator.set_validity(days)

        with self.logging_service.measure_performance('create_fake'):
            data = generator.to_container()

        with open(output_path, 'wb') as f:
            f.write(data)

        self.logger.info(f"Fake certificate written to {output_path}")
        return generator.subject.serialNumber

    def describe(self, file_path: str, password: str, show_key: bool = False) -> dict:
        """Load a certificate file and summarize it."""
        certificate = self.certificate_service.load_from_file(file_path, password)
        summary = {
            'id': certificate.get_id(),
            'name': certificate.get_name(),
            'email': certificate.get_email(),
            'issuer': certificate.get_issuer(),
            'from': certificate.get_from(),
            'to': certificate.get_to(),
            'total_days': certificate.get_total_days(),
            'expiration_days': certificate.get_expiration_days(),
            'active': certificate.is_active(),
        }
        if show_key:
            summary['modulus'] = certificate.get_modulus()
            summary['exponent'] = certificate.get_exponent()
        return summary

    def validate(self, file_path: str, password: str) -> None:
        certificate = self.certificate_service.load_from_file(file_path, password)
        self.certificate_service.validate(certificate)


def main(argv=None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description='Digital certificate (electronic signature) toolkit')
    parser.add_argument('--config', '-c', help='Configuration file path')
    subparsers = parser.add_subparsers(dest='command', required=True)

    fake_parser = subparsers.add_parser('fake', help='Create a self-signed certificate for testing')
    fake_parser.add_argument('--output', '-o', required=True, help='PKCS#12 file to write')
    fake_parser.add_argument('--id', help='Holder ID (RUN)')
    fake_parser.add_argument('--name', help='Holder name')
    fake_parser.add_argument('--email', help='Holder email')
    fake_parser.add_argument('--password', help='Container password')
    fake_parser.add_argument('--days', type=int, help='Validity in days')

    inspect_parser = subparsers.add_parser('inspect', help='Show the data of a certificate')
    inspect_parser.add_argument('file', help='PKCS#12 file')
    inspect_parser.add_argument('--password', '-p', required=True, help='Container password')
    inspect_parser.add_argument('--show-key', action='store_true', help='Include RSA modulus and exponent')

    validate_parser = subparsers.add_parser('validate', help='Validate a certificate for electronic signature')
    validate_parser.add_argument('file', help='PKCS#12 file')
    validate_parser.add_argument('--password', '-p', required=True, help='Container password')

    args = parser.parse_args(argv)

    app = CertificateToolApplication(config_path=args.config)
    if not app.initialize():
        return 1

    try:
        if args.command == 'fake':
            holder_id = app.create_fake(
                args.output, args.id, args.name, args.email, args.password, args.days
            )
            elapsed = app.logging_service.last_duration_ms('create_fake')
            print(f"Created certificate for {holder_id} in {elapsed:.0f} ms: {args.output}")
        elif args.command == 'inspect':
            for key, value in app.describe(args.file, args.password, args.show_key).items():
                print(f"{key}: {value}")
        elif args.command == 'validate':
            app.validate(args.file, args.password)
            print("Certificate is valid")
    except (CertificateError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
