"""API 패키지 — FastAPI 라우터와 인증 의존성.

API package — FastAPI routers and authentication dependencies.
"""
