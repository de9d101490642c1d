"""
Unit tests for CertificateError and OpenSSL error translation.
"""
import unittest
from types import SimpleNamespace

from cryptography.exceptions import InternalError

from src.security.exceptions import CertificateError, backend_errors, translate_openssl_errors
from src.security.models import ChainStage


class TestCertificateError(unittest.TestCase):
    """Test cases for CertificateError."""

    def test_message_without_errors(self):
        """Test a plain message."""
        error = CertificateError("Cannot read certificate.")

        self.assertEqual(str(error), "Cannot read certificate.")
        self.assertEqual(error.get_errors(), [])
        self.assertIsNone(error.stage)

    def test_known_code_is_translated(self):
        """Test that a known OpenSSL code becomes a readable message."""
        error = CertificateError(
            "Cannot read certificate.",
            ["error:11800071:PKCS12 routines::mac verify failure"]
        )

        self.assertEqual(
            error.errors,
            ["MAC verification failed in PKCS12, certificate or password is incorrect (Error #11800071)."]
        )
        self.assertIn("(Error #11800071).", str(error))

    def test_unknown_error_passes_through(self):
        """Test that unknown errors are kept verbatim."""
        errors = translate_openssl_errors(["Could not deserialize key data"])

        self.assertEqual(errors, ["Could not deserialize key data"])

    def test_backend_message_without_code_is_translated(self):
        """Test that the PKCS#12 password failure maps to the MAC description."""
        errors = translate_openssl_errors(["Invalid password or PKCS12 data"])

        self.assertEqual(
            errors,
            ["MAC verification failed in PKCS12, certificate or password is incorrect (Error #11800071)."]
        )

    def test_backend_errors_from_internal_error(self):
        """Test that the OpenSSL error stack of an InternalError is collected."""
        error = InternalError("Unknown OpenSSL error", [
            SimpleNamespace(reason_text=b"error:0B080074:x509 certificate routines::key values mismatch"),
            SimpleNamespace(reason_text=b"something else"),
        ])

        wrapped = CertificateError("Failed.", backend_errors(error))

        self.assertEqual(wrapped.errors, ["Invalid PEM format (Error #0B080074).", "something else"])

    def test_backend_errors_from_plain_exception(self):
        """Test that other exceptions contribute their message."""
        self.assertEqual(backend_errors(ValueError("bad data")), ["bad data"])

    def test_stage_is_recorded(self):
        """Test that the generator stage travels with the error."""
        error = CertificateError("Failed.", stage=ChainStage.PACKAGING)

        self.assertEqual(error.stage, ChainStage.PACKAGING)
        self.assertEqual(error.stage.value, 'packaging')


if __name__ == '__main__':
    unittest.main()
