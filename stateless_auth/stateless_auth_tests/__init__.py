"""
Tests for the stateless auth service.

Covers password hashing (`auth.py`), token issuance and verification
(`tokens.py`), the user stores (`store.py`), the signup/login/access flows
(`gate.py`) and the HTTP surface (`main.py`, `routes/`).
"""
