#!/usr/bin/env python3
import hashlib
import hmac
import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sentry_proxy.auth import SignatureAuthenticator, TokenAuthenticator, build_authenticator
from sentry_proxy.config import ProxyConfig
from sentry_proxy.errors import AuthenticationError, ConfigError
from sentry_proxy.transform import LAYOUTS

NOW = 1700000000
SECRET = 'client-secret'
BODY = b'{"data": {"error": {"level": "error"}}}'


def signature(body, secret=SECRET):
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


class TestTokenAuthenticator(unittest.TestCase):
    def test_matching_token(self):
        TokenAuthenticator('s3cret').authenticate(b'', {}, {'auth_token': 's3cret'})

    def test_wrong_or_missing_token(self):
        auth = TokenAuthenticator('s3cret')
        for args in ({'auth_token': 's3cre'}, {'auth_token': ''}, {}):
            with self.assertRaises(AuthenticationError):
                auth.authenticate(b'', {}, args)

    def test_empty_token_is_config_error(self):
        with self.assertRaises(ConfigError):
            TokenAuthenticator('')


class TestSignatureAuthenticator(unittest.TestCase):
    def setUp(self):
        self.auth = SignatureAuthenticator(SECRET, clock=lambda: NOW)

    def headers(self, timestamp, sig=None):
        return {
            'Sentry-Hook-Signature': sig if sig is not None else signature(BODY),
            'Sentry-Hook-Timestamp': str(timestamp),
        }

    def test_accepts_within_window(self):
        self.auth.authenticate(BODY, self.headers(NOW - 29), {})
        self.auth.authenticate(BODY, self.headers(NOW - 30), {})

    def test_rejects_stale_timestamp(self):
        with self.assertRaises(AuthenticationError):
            self.auth.authenticate(BODY, self.headers(NOW - 31), {})

    def test_future_timestamp_accepted(self):
        self.auth.authenticate(BODY, self.headers(NOW + 120), {})

    def test_rejects_wrong_signature_of_correct_length(self):
        wrong = '0' * 64
        for ts in (NOW, NOW - 29, NOW - 31):
            with self.assertRaises(AuthenticationError):
                self.auth.authenticate(BODY, self.headers(ts, sig=wrong), {})

    def test_rejects_signature_of_other_body(self):
        with self.assertRaises(AuthenticationError):
            self.auth.authenticate(BODY + b' ', self.headers(NOW), {})

    def test_rejects_non_hex_signature(self):
        self.assertFalse(self.auth.verify_signature(BODY, 'not-hex'))
        self.assertFalse(self.auth.verify_signature(BODY, None))

    def test_rejects_unparseable_timestamp(self):
        for value in ('', 'abc', '1700000000.5', None):
            with self.assertRaises(AuthenticationError):
                self.auth.verify_timestamp(value)

    def test_rejects_non_plain_integer_timestamp(self):
        for value in ('1_700_000_000', '+1700000000', '\u0661\u0667\u0660\u0660', '0x6553f100'):
            with self.assertRaises(AuthenticationError, msg=value):
                self.auth.verify_timestamp(value)

    def test_accepts_plain_integer_timestamp(self):
        self.assertEqual(self.auth.verify_timestamp(str(NOW)), NOW)
        self.assertEqual(self.auth.verify_timestamp(' 1700000000 '), NOW)

    def test_custom_window(self):
        auth = SignatureAuthenticator(SECRET, replay_window=60, clock=lambda: NOW)
        self.assertEqual(auth.verify_timestamp(str(NOW - 59)), NOW - 59)


class TestBuildAuthenticator(unittest.TestCase):
    def test_selects_by_mode(self):
        token_cfg = ProxyConfig('https://discord.test/hook', LAYOUTS['issue'], 'token', auth_token='t')
        sig_cfg = ProxyConfig('https://discord.test/hook', LAYOUTS['error'], 'signature', client_secret='s',
                              replay_window_seconds=45)
        self.assertIsInstance(build_authenticator(token_cfg), TokenAuthenticator)
        sig_auth = build_authenticator(sig_cfg)
        self.assertIsInstance(sig_auth, SignatureAuthenticator)
        self.assertEqual(sig_auth.replay_window, 45)

    def test_unknown_mode(self):
        cfg = ProxyConfig('https://discord.test/hook', LAYOUTS['issue'], 'basic')
        with self.assertRaises(ConfigError):
            build_authenticator(cfg)


if __name__ == '__main__':
    unittest.main()
