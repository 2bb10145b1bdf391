"""
Tests for AES-256-GCM token encryption and decryption.
"""

import hashlib
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock

import pytest

from ectoken import V3, AeadCodec, CodecConfig, PolicyToken, decrypt, derive_key, encrypt
from ectoken.crypto import IV_SIZE, KEY_SIZE, MIN_ENVELOPE_SIZE, TAG_SIZE
from ectoken.errors import AuthenticationError, ECTokenError, FormatError
from ectoken.util.encoding import url_safe_decode, url_safe_encode

KEY = "my-secret-key"
PARAMS = "ec_expire=12345678&ec_clientip=1.2.3.4"

# Produced by an earlier release with KEY; pins the wire format.
KNOWN_TOKEN = "WWNONztpLdGM11awAYiFRuIIiIG1LOBQaO2cEtCXjT5PelAA-Tavv7eD9YtSeGM13uQsobIkL0xYf6DZLzM6iMbe"


@pytest.fixture
def policy():
    """Create the policy matching PARAMS"""
    token = PolicyToken()
    token.add_value("ec_expire", 12345678)
    token.add_value("ec_clientip", "1.2.3.4")
    return token


class TestKeyDerivation:
    """Test passphrase to key reduction"""

    def test_sha256_of_passphrase(self):
        """Test the key is the SHA-256 digest of the UTF-8 passphrase"""
        assert derive_key(KEY) == hashlib.sha256(KEY.encode("utf-8")).digest()

    @pytest.mark.parametrize("passphrase", ["", "k", "x" * 1000, "clé secrète"])
    def test_always_32_bytes(self, passphrase):
        """Test passphrases of any length give a 256-bit key"""
        assert len(derive_key(passphrase)) == KEY_SIZE


class TestEncryptDecrypt:
    """Test the encrypt/decrypt round trip"""

    def test_decrypt_known_token(self):
        """Test a token from an earlier release still decrypts"""
        assert decrypt(KEY, KNOWN_TOKEN) == PARAMS

    def test_round_trip_string(self):
        """Test a plain string round trips"""
        assert decrypt(KEY, encrypt(KEY, PARAMS)) == PARAMS

    def test_round_trip_policy_token(self, policy):
        """Test a PolicyToken is encrypted through its serialized form"""
        sealed = encrypt(KEY, policy)
        assert isinstance(sealed, str)
        assert decrypt(KEY, sealed) == PARAMS

    def test_round_trip_empty(self):
        """Test the empty policy round trips"""
        sealed = encrypt(KEY, PolicyToken())
        assert len(url_safe_decode(sealed)) == MIN_ENVELOPE_SIZE
        assert decrypt(KEY, sealed) == ""

    def test_round_trip_unicode(self):
        """Test non-ASCII text survives"""
        text = "ec_url_allow=/vidéos/日本"
        assert decrypt("ключ", encrypt("ключ", text)) == text

    def test_fresh_iv_per_call(self):
        """Test equal inputs give different tokens that decrypt the same"""
        first = encrypt(KEY, PARAMS)
        second = encrypt(KEY, PARAMS)
        assert first != second
        assert url_safe_decode(first)[:IV_SIZE] != url_safe_decode(second)[:IV_SIZE]
        assert decrypt(KEY, first) == decrypt(KEY, second) == PARAMS

    def test_envelope_layout(self):
        """Test the envelope is iv || ciphertext || tag"""
        envelope = url_safe_decode(encrypt(KEY, PARAMS))
        assert len(envelope) == IV_SIZE + len(PARAMS.encode("utf-8")) + TAG_SIZE

    def test_output_is_unpadded_base64url(self):
        """Test the wire token uses the URL-safe alphabet without padding"""
        for _ in range(20):
            sealed = encrypt(KEY, PARAMS + "?")
            assert "=" not in sealed
            assert "+" not in sealed
            assert "/" not in sealed

    @pytest.mark.parametrize("bad", [None, b"ec_expire=1", 12345678, ["ec_clientip=1.2.3.4"]])
    def test_rejects_non_policy_input(self, bad):
        """Test only strings and PolicyTokens are encrypted"""
        with pytest.raises(TypeError):
            encrypt(KEY, bad)

    def test_v3_namespace(self):
        """Test the V3 namespace exposes the same operations"""
        assert V3.decrypt(KEY, V3.encrypt(KEY, PARAMS)) == PARAMS

    def test_concurrent_calls(self):
        """Test concurrent encryptions never share an IV"""
        with ThreadPoolExecutor(max_workers=8) as pool:
            tokens = list(pool.map(lambda i: encrypt(KEY, f"ec_clientip=10.0.0.{i}"), range(64)))

        ivs = {url_safe_decode(t)[:IV_SIZE] for t in tokens}
        assert len(ivs) == len(tokens)
        assert decrypt(KEY, tokens[7]) == "ec_clientip=10.0.0.7"


class TestAuthentication:
    """Test tag verification failures"""

    def test_wrong_key(self):
        """Test decrypting with another key fails authentication"""
        with pytest.raises(AuthenticationError) as exc_info:
            decrypt("other-key", encrypt(KEY, PARAMS))
        assert exc_info.value.error_code == "AUTHENTICATION_ERROR"

    def test_single_bit_flips(self):
        """Test flipping any bit of the envelope is detected"""
        envelope = url_safe_decode(encrypt(KEY, PARAMS))

        for index in range(len(envelope)):
            tampered = bytearray(envelope)
            tampered[index] ^= 1 << (index % 8)
            with pytest.raises(AuthenticationError):
                decrypt(KEY, url_safe_encode(bytes(tampered)))

    def test_truncated_tag(self):
        """Test dropping a byte misaligns the tag"""
        envelope = url_safe_decode(encrypt(KEY, PARAMS))
        with pytest.raises(AuthenticationError):
            decrypt(KEY, url_safe_encode(envelope[:-1]))

    def test_distinct_from_format_error(self):
        """Test authentication and format failures are separate kinds"""
        assert not issubclass(AuthenticationError, FormatError)
        assert not issubclass(FormatError, AuthenticationError)
        assert issubclass(AuthenticationError, ECTokenError)


class TestFormatErrors:
    """Test malformed wire tokens"""

    @pytest.mark.parametrize("bad", ["abc+def", "abc/def", "abc def", "a.b", "abc*"])
    def test_rejects_foreign_characters(self, bad):
        """Test characters outside base64url are refused"""
        with pytest.raises(FormatError):
            decrypt(KEY, bad)

    def test_rejects_short_envelope(self):
        """Test envelopes smaller than iv + tag are refused"""
        with pytest.raises(FormatError) as exc_info:
            decrypt(KEY, url_safe_encode(b"\x00" * (MIN_ENVELOPE_SIZE - 1)))
        assert exc_info.value.details["length"] == MIN_ENVELOPE_SIZE - 1

    def test_rejects_empty_token(self):
        """Test the empty string is not a token"""
        with pytest.raises(FormatError):
            decrypt(KEY, "")

    def test_accepts_padding(self):
        """Test padded input is tolerated"""
        sealed = encrypt(KEY, PARAMS + "!")
        padded = sealed + "=" * (-len(sealed) % 4)
        assert decrypt(KEY, padded) == PARAMS + "!"

    def test_rejects_invalid_utf8(self):
        """Test authenticated bytes that are not UTF-8 are refused"""
        from cryptography.hazmat.primitives.ciphers.aead import AESGCM

        iv = b"\x01" * IV_SIZE
        sealed = AESGCM(derive_key(KEY)).encrypt(iv, b"\xff\xfe\xfd", None)
        with pytest.raises(FormatError):
            decrypt(KEY, url_safe_encode(iv + sealed))


class TestVerboseOutput:
    """Test the diagnostic side channel"""

    def test_encrypt_logs_only_when_verbose(self):
        """Test nothing is logged unless verbose is set"""
        sink = Mock()
        encrypt(KEY, PARAMS, log=sink)
        sink.info.assert_not_called()

    def test_encrypt_logs_envelope_parts(self):
        """Test verbose encryption logs iv, ciphertext, tag and envelope"""
        sink = Mock()
        sealed = encrypt(KEY, PARAMS, verbose=True, log=sink)

        messages = [call.args[0] for call in sink.info.call_args_list]
        envelope = url_safe_decode(sealed)
        assert f"iv: {envelope[:IV_SIZE].hex()}" in messages
        assert f"tag: {envelope[-TAG_SIZE:].hex()}" in messages
        assert f"encoded_token: {envelope.hex()}" in messages
        assert decrypt(KEY, sealed) == PARAMS

    def test_decrypt_logs_plaintext(self):
        """Test verbose decryption logs the recovered text"""
        sink = Mock()
        assert decrypt(KEY, KNOWN_TOKEN, verbose=True, log=sink) == PARAMS
        messages = [call.args[0] for call in sink.info.call_args_list]
        assert f"decrypted_str: {PARAMS}" in messages

    def test_default_logger(self, caplog):
        """Test verbose output goes to the module logger by default"""
        with caplog.at_level("INFO", logger="ectoken.crypto.codec"):
            encrypt(KEY, PARAMS, verbose=True)
        assert any(record.message.startswith("iv: ") for record in caplog.records)


class TestAeadCodec:
    """Test the configured codec"""

    def test_round_trip(self, policy):
        """Test the codec uses its configured key"""
        codec = AeadCodec(CodecConfig(secret_key=KEY))
        sealed = codec.encrypt(policy)
        assert codec.decrypt(sealed) == PARAMS
        assert decrypt(KEY, sealed) == PARAMS

    def test_requires_key(self, monkeypatch):
        """Test a codec cannot be built without a key"""
        monkeypatch.delenv("ECTOKEN_SECRET_KEY", raising=False)
        with pytest.raises(ValueError):
            AeadCodec()

    def test_key_from_env(self, monkeypatch):
        """Test the codec falls back to environment configuration"""
        monkeypatch.setenv("ECTOKEN_SECRET_KEY", KEY)
        assert AeadCodec().decrypt(KNOWN_TOKEN) == PARAMS

    def test_verbose_config_uses_injected_logger(self):
        """Test the verbose flag routes diagnostics to the given logger"""
        sink = Mock()
        codec = AeadCodec(CodecConfig(secret_key=KEY, verbose=True), log=sink)
        codec.decrypt(KNOWN_TOKEN)
        assert sink.info.called
