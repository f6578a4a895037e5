"""Tests for hashing utilities."""

from persistql.core.entities import HashingAlgorithm
from persistql.utils.hashing import hash_query

QUERY = "query getCount {\n  count {\n    amount\n  }\n}\n"


class TestHashQuery:
    """Tests for hash_query."""

    def test_sha512_default(self) -> None:
        """Test the default digest."""
        assert hash_query(QUERY) == (
            "814a73189bb27afa27206ece8d2594cd98004484ca29b13b091ac7a84d2a5577"
            "e550624343d7e2f058d0701daa9b6c07f6c9a5c57a8cd60a063c9e5fdc917f5a"
        )

    def test_sha256(self) -> None:
        """Test the SHA-256 digest."""
        digest = hash_query(QUERY, HashingAlgorithm.SHA256)

        assert digest == "4722dce4b669412291b70e2bfd2d6471fd55e599775a44c1a2d2721352583733"

    def test_lowercase_hex(self) -> None:
        """Test the digest alphabet and length."""
        digest = hash_query("query A {\n  a\n}\n")

        assert len(digest) == 128
        assert digest == digest.lower()
        assert all(char in "0123456789abcdef" for char in digest)

    def test_different_texts(self) -> None:
        """Test that whitespace differences change the digest."""
        assert hash_query("query A {\n  a\n}\n") != hash_query("query A { a }")
