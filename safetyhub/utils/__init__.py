"""유틸리티 패키지 — 예외, JWT, 이메일, PDF.

Utility package — exceptions, JWT, email and PDF rendering.
"""
