"""Cryptographic utilities (key derivation, sealed records, password advice).

Record layout (hex encoded on disk):
	nonce (16 bytes) || GCM tag (16 bytes) || AES-256-GCM ciphertext
"""
from __future__ import annotations
import base64, binascii, hashlib, secrets
from typing import Tuple
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.backends import default_backend
from config.settings import KEY_LENGTH, NONCE_LENGTH, AUTH_TAG_LENGTH

HEADER_LENGTH = NONCE_LENGTH + AUTH_TAG_LENGTH

class CryptoError(Exception):
	pass

class AuthFailure(CryptoError):
	"""Record did not open: wrong key, tampered data or malformed input."""

	def __init__(self, msg: str = 'Wrong password or corrupted record'):
		super().__init__(msg)

def derive_key(password: str) -> bytes:
	"""Legacy password -> key derivation.

	First 32 characters of base64(SHA-256(password)). No salt and no work
	factor; kept so existing .diary files still open.
	"""
	digest = hashlib.sha256(password.encode('utf-8')).digest()
	return base64.b64encode(digest)[:KEY_LENGTH]

def encode_record(nonce: bytes, tag: bytes, ciphertext: bytes) -> str:
	if len(nonce) != NONCE_LENGTH or len(tag) != AUTH_TAG_LENGTH:
		raise CryptoError('Bad record header')
	return (nonce + tag + ciphertext).hex()

def decode_record(record: str) -> Tuple[bytes, bytes, bytes]:
	try:
		raw = bytes.fromhex(record.strip())
	except (ValueError, TypeError, AttributeError, binascii.Error):
		raise AuthFailure()
	if len(raw) < HEADER_LENGTH:
		raise AuthFailure()
	return raw[:NONCE_LENGTH], raw[NONCE_LENGTH:HEADER_LENGTH], raw[HEADER_LENGTH:]

class DiaryCrypto:
	def __init__(self):
		self._backend = default_backend()

	def _check_key(self, key: bytes) -> None:
		if len(key) != KEY_LENGTH: raise CryptoError("Bad key length")

	def seal(self, plaintext: bytes, key: bytes) -> str:
		self._check_key(key)
		nonce = secrets.token_bytes(NONCE_LENGTH)
		cipher = Cipher(algorithms.AES(key), modes.GCM(nonce), backend=self._backend)
		enc = cipher.encryptor()
		ct = enc.update(plaintext) + enc.finalize()
		return encode_record(nonce, enc.tag, ct)

	def open(self, record: str, key: bytes) -> bytes:
		self._check_key(key)
		nonce, tag, ct = decode_record(record)
		cipher = Cipher(algorithms.AES(key), modes.GCM(nonce, tag), backend=self._backend)
		dec = cipher.decryptor()
		try:
			return dec.update(ct) + dec.finalize()
		except InvalidTag:
			raise AuthFailure()

	def seal_text(self, text: str, key: bytes) -> str:
		return self.seal(text.encode('utf-8'), key)

	def open_text(self, record: str, key: bytes) -> str:
		try:
			return self.open(record, key).decode('utf-8')
		except UnicodeDecodeError:
			raise AuthFailure()

def check_password_strength(password: str) -> Tuple[int, str]:
	"""Score a password 0-100 with short advice. Advisory only."""
	score = 0; fb = []
	L = len(password)
	if L >= 12: score += 30
	elif L >= 8: score += 20; fb.append('Use 12+ chars')
	else: fb.append('Too short (min 8)')
	sets = [any(c.islower() for c in password), any(c.isupper() for c in password), any(c.isdigit() for c in password), any(not c.isalnum() for c in password)]
	score += sum(sets)*15
	if sum(sets) < 4: fb.append('Mix upper/lower case, digits and symbols')
	common = ['password','qwerty','abc','123','111','diary']
	if any(p in password.lower() for p in common):
		score -= 15; fb.append('Avoid common patterns')
	if L and len(set(password)) < L*0.6:
		score -= 10; fb.append('Too many repeats')
	score = max(0, min(100, score))
	if score >= 80: label='Very Strong'
	elif score >= 60: label='Strong'
	elif score >= 40: label='Moderate'
	elif score >= 20: label='Weak'
	else: label='Very Weak'
	text = f"{label} ({score}/100)"
	if fb: text += ' - ' + ', '.join(fb)
	return score, text
