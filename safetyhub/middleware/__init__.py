"""미들웨어 패키지 — Request logging middleware."""
