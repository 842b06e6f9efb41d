"""Unit tests for password hashing."""

from pavilion.util.password import hash_password, verify_password


class TestPasswordHashing:
    def test_correct_password_verifies(self):
        stored = hash_password("correct horse battery staple")

        assert verify_password("correct horse battery staple", stored)

    def test_wrong_password_fails(self):
        stored = hash_password("correct horse battery staple")

        assert not verify_password("Correct horse battery staple", stored)

    def test_hashes_are_salted(self):
        """The same password hashes differently each time."""
        assert hash_password("secret") != hash_password("secret")

    def test_format_carries_parameters(self):
        scheme, n, r, p, salt, digest = hash_password("secret").split("$")

        assert scheme == "scrypt"
        assert (n, r, p) == ("16384", "8", "1")
        assert len(bytes.fromhex(salt)) == 16
        assert len(bytes.fromhex(digest)) == 64

    def test_unknown_format_is_rejected_without_raising(self):
        assert not verify_password("secret", "bcrypt$whatever")
        assert not verify_password("secret", "")
        assert not verify_password("secret", "scrypt$x$y$z$nothex$nothex")
